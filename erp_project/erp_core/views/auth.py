import logging

from django.db import DatabaseError
from django.views.decorators.http import require_POST

from .. import payloads
from ..exceptions import Conflict
from ..models import Tenant, User
from ..serializers import user_to_dict
from ..tokens import issue_token
from .common import error, json_errors, respond

logger = logging.getLogger(__name__)

CREDENTIALS_REQUIRED = "Tenant ID, email and password are required"


def _token_response(user, status):
    return respond({"token": issue_token(user), "user": user_to_dict(user)},
                   status=status)


@require_POST
@json_errors
def login(request):
    data = payloads.parse_json(request)
    payloads.require(data, ("tenant_id", "email", "password"),
                     CREDENTIALS_REQUIRED)
    tenant_id = payloads.identifier(data, "tenant_id")

    user = User.objects.authenticate(
        tenant_id, payloads.text(data, "email"),
        payloads.text(data, "password"))
    if user is None:
        return error("Invalid credentials", 401)

    return _token_response(user, 200)


@require_POST
@json_errors
def register(request):
    data = payloads.parse_json(request)
    payloads.require(data, ("tenant_id", "email", "password"),
                     CREDENTIALS_REQUIRED)
    tenant = Tenant.objects.get_by_id(payloads.identifier(data, "tenant_id"))
    if tenant is None:
        return error("Tenant not found", 404)

    email = payloads.text(data, "email")
    if User.objects.get_by_email(tenant, email) is not None:
        raise Conflict("User already exists")

    try:
        user = User.objects.create_user(
            tenant, email, payloads.text(data, "password"),
            first_name=payloads.text(data, "first_name"),
            last_name=payloads.text(data, "last_name"),
            role=payloads.text(data, "role", "user"),
        )
    except DatabaseError:
        logger.exception("register failed for tenant %s", tenant.pk)
        return error("Error creating user", 500)

    return _token_response(user, 201)
