import logging

from django.db import DatabaseError
from django.views.decorators.http import require_GET, require_http_methods

from .. import payloads
from ..exceptions import Conflict
from ..middleware import token_required
from ..models import Tenant
from ..serializers import tenant_to_dict
from .common import deleted, error, json_errors, not_found, respond

logger = logging.getLogger(__name__)

NAME_AND_SUBDOMAIN_REQUIRED = "Name and subdomain are required"


# Public: lets a login page resolve "acme" → tenant id
@require_GET
def tenant_by_subdomain(request, subdomain):
    tenant = Tenant.objects.get_by_subdomain(subdomain)
    if tenant is None:
        return not_found("Tenant")
    return respond(tenant_to_dict(tenant))


@require_http_methods(["GET", "POST"])
@token_required
@json_errors
def tenant_collection(request):
    if request.method == "GET":
        return respond([tenant_to_dict(t) for t in Tenant.objects.order_by("name")])

    data = payloads.parse_json(request)
    payloads.require(data, ("name", "subdomain"), NAME_AND_SUBDOMAIN_REQUIRED)
    subdomain = payloads.text(data, "subdomain")
    if Tenant.objects.get_by_subdomain(subdomain) is not None:
        raise Conflict("Tenant with this subdomain already exists")

    try:
        tenant = Tenant.objects.create(
            name=payloads.text(data, "name"), subdomain=subdomain)
    except DatabaseError:
        logger.exception("tenant create failed")
        return error("Error creating tenant", 500)
    return respond(tenant_to_dict(tenant), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def tenant_detail(request, pk):
    tenant = Tenant.objects.get_by_id(pk)
    if tenant is None:
        return not_found("Tenant")

    if request.method == "GET":
        return respond(tenant_to_dict(tenant))

    if request.method == "DELETE":
        try:
            tenant.delete()
        except DatabaseError:
            logger.exception("tenant %s delete failed", pk)
            return error("Error deleting tenant", 500)
        return deleted("Tenant")

    data = payloads.parse_json(request)
    payloads.require(data, ("name", "subdomain"), NAME_AND_SUBDOMAIN_REQUIRED)
    subdomain = payloads.text(data, "subdomain")
    clash = Tenant.objects.get_by_subdomain(subdomain)
    if clash is not None and clash.pk != tenant.pk:
        raise Conflict("Tenant with this subdomain already exists")

    tenant.name = payloads.text(data, "name")
    tenant.subdomain = subdomain
    try:
        tenant.save(update_fields=["name", "subdomain", "updated_at"])
    except DatabaseError:
        logger.exception("tenant %s update failed", pk)
        return error("Error updating tenant", 500)
    return respond(tenant_to_dict(tenant))
