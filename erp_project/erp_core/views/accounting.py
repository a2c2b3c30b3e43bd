import logging

from django.db import DatabaseError
from django.db.models import ProtectedError
from django.views.decorators.http import require_http_methods

from .. import payloads
from ..exceptions import Conflict, InvalidPayload
from ..middleware import token_required
from ..models import Account, JournalEntry, JournalEntryLine
from ..serializers import account_to_dict, journal_entry_to_dict
from ..services import journal as journal_service
from .common import deleted, error, json_errors, not_found, respond

logger = logging.getLogger(__name__)

ACCOUNT_FIELDS_REQUIRED = "Code, name and type are required"


# ----------------------------
# Chart of accounts
# ----------------------------
def _apply_account_payload(account, data):
    payloads.require(data, ("code", "name", "type"), ACCOUNT_FIELDS_REQUIRED)
    account.code = payloads.text(data, "code")
    account.name = payloads.text(data, "name")
    account.type = payloads.text(data, "type")
    account.description = payloads.text(data, "description")
    # Within one tenant, each code must be unique
    clash = Account.objects.for_tenant(account.tenant_id).filter(
        code=account.code).exclude(pk=account.pk).exists()
    if clash:
        raise Conflict("Account with this code already exists")


@require_http_methods(["GET", "POST"])
@token_required
@json_errors
def account_collection(request):
    tenant_id = request.tenant_id

    if request.method == "GET":
        accounts = Account.objects.for_tenant(tenant_id).order_by("code")
        return respond([account_to_dict(a) for a in accounts])

    account = Account(tenant_id=tenant_id)
    _apply_account_payload(account, payloads.parse_json(request))
    try:
        account.save(force_insert=True)
    except DatabaseError:
        logger.exception("account create failed for tenant %s", tenant_id)
        return error("Error creating account", 500)
    return respond(account_to_dict(account), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def account_detail(request, pk):
    account = Account.objects.get_scoped(request.tenant_id, pk)
    if account is None:
        return not_found("Account")

    if request.method == "GET":
        return respond(account_to_dict(account))

    if request.method == "DELETE":
        try:
            account.delete()
        except ProtectedError:
            return error("Account is used by journal entry lines", 409)
        except DatabaseError:
            logger.exception("account %s delete failed", pk)
            return error("Error deleting account", 500)
        return deleted("Account")

    _apply_account_payload(account, payloads.parse_json(request))
    try:
        account.save(update_fields=[
            "code", "name", "type", "description", "updated_at"])
    except DatabaseError:
        logger.exception("account %s update failed", pk)
        return error("Error updating account", 500)
    return respond(account_to_dict(account))


# ----------------------------
# Journal entries
# ----------------------------
def _parse_lines(data, tenant_id):
    raw_lines = data.get("lines")
    if raw_lines is None or raw_lines == []:
        raise InvalidPayload("At least one journal entry line is required")
    if not isinstance(raw_lines, list):
        raise InvalidPayload(payloads.INVALID_PAYLOAD)

    lines = []
    for raw in raw_lines:
        if not isinstance(raw, dict):
            raise InvalidPayload(payloads.INVALID_PAYLOAD)
        account_id = payloads.identifier(raw, "account_id")
        if account_id is None:
            raise InvalidPayload("Each journal entry line requires an account_id")
        debit = payloads.decimal(raw, "debit")
        credit = payloads.decimal(raw, "credit")
        if debit < 0 or credit < 0:
            raise InvalidPayload("Debit and credit must be non-negative")
        lines.append(JournalEntryLine(
            tenant_id=tenant_id,
            account_id=account_id,
            description=payloads.text(raw, "description"),
            debit=debit,
            credit=credit,
        ))

    # every referenced account must exist inside the caller's tenant
    wanted = {line.account_id for line in lines}
    known = set(
        Account.objects.for_tenant(tenant_id)
        .filter(pk__in=wanted).values_list("pk", flat=True)
    )
    missing = sorted(wanted - known)
    if missing:
        raise InvalidPayload(
            "Unknown account_id: " + ", ".join(str(m) for m in missing))
    return lines


def _parse_header(entry, data):
    entry_date = payloads.date_value(data, "entry_date")
    if entry_date is None:
        raise InvalidPayload("Entry date is required")
    entry.entry_date = entry_date
    entry.reference = payloads.text(data, "reference")
    entry.description = payloads.text(data, "description")


@require_http_methods(["GET", "POST"])
@token_required
@json_errors
def journal_entry_collection(request):
    tenant_id = request.tenant_id

    if request.method == "GET":
        try:
            entries = journal_service.list_journal_entries(tenant_id)
        except DatabaseError:
            logger.exception("journal entry list failed for tenant %s", tenant_id)
            return error("Error listing journal entries", 500)
        return respond([journal_entry_to_dict(e) for e in entries])

    data = payloads.parse_json(request)
    entry = JournalEntry(tenant_id=tenant_id, created_by_id=request.user_id)
    _parse_header(entry, data)
    lines = _parse_lines(data, tenant_id)

    try:
        journal_service.create_journal_entry(entry, lines)
    except DatabaseError:
        logger.exception("journal entry create failed for tenant %s", tenant_id)
        return error("Error creating journal entry", 500)
    return respond(journal_entry_to_dict(entry), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def journal_entry_detail(request, pk):
    tenant_id = request.tenant_id

    if request.method == "PUT":
        # validate first, then look the entry up
        data = payloads.parse_json(request)
        entry = JournalEntry(tenant_id=tenant_id)
        _parse_header(entry, data)
        lines = _parse_lines(data, tenant_id)

    existing = journal_service.get_journal_entry(tenant_id, pk)
    if existing is None:
        return not_found("Journal entry")

    if request.method == "GET":
        return respond(journal_entry_to_dict(existing))

    if request.method == "DELETE":
        try:
            journal_service.delete_journal_entry(tenant_id, pk)
        except DatabaseError:
            logger.exception("journal entry %s delete failed", pk)
            return error("Error deleting journal entry", 500)
        return deleted("Journal entry")

    existing.entry_date = entry.entry_date
    existing.reference = entry.reference
    existing.description = entry.description
    try:
        journal_service.update_journal_entry(existing, lines)
    except DatabaseError:
        logger.exception("journal entry %s update failed", pk)
        return error("Error updating journal entry", 500)
    return respond(journal_entry_to_dict(existing))
