import logging

from django.db import DatabaseError
from django.views.decorators.http import require_http_methods

from .. import payloads
from ..exceptions import Conflict
from ..middleware import token_required
from ..models import User
from ..serializers import user_to_dict
from .common import deleted, error, json_errors, not_found, respond

logger = logging.getLogger(__name__)


@require_http_methods(["GET", "POST"])
@token_required
@json_errors
def user_collection(request):
    tenant_id = request.tenant_id

    if request.method == "GET":
        users = User.objects.for_tenant(tenant_id).order_by("email")
        return respond([user_to_dict(u) for u in users])

    data = payloads.parse_json(request)
    payloads.require(data, ("email", "password"), "Email and password are required")
    email = payloads.text(data, "email")
    if User.objects.get_by_email(tenant_id, email) is not None:
        raise Conflict("User with this email already exists")

    try:
        user = User.objects.create_user(
            tenant_id, email, payloads.text(data, "password"),
            first_name=payloads.text(data, "first_name"),
            last_name=payloads.text(data, "last_name"),
            role=payloads.text(data, "role", "user"),
        )
    except DatabaseError:
        logger.exception("user create failed for tenant %s", tenant_id)
        return error("Error creating user", 500)
    return respond(user_to_dict(user), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def user_detail(request, pk):
    tenant_id = request.tenant_id
    user = User.objects.get_scoped(tenant_id, pk)
    if user is None:
        return not_found("User")

    if request.method == "GET":
        return respond(user_to_dict(user))

    if request.method == "DELETE":
        try:
            user.delete()
        except DatabaseError:
            logger.exception("user %s delete failed", pk)
            return error("Error deleting user", 500)
        return deleted("User")

    data = payloads.parse_json(request)
    payloads.require(data, ("email",), "Email is required")
    email = User.objects.normalize_email(payloads.text(data, "email"))
    clash = User.objects.get_by_email(tenant_id, email)
    if clash is not None and clash.pk != user.pk:
        raise Conflict("User with this email already exists")

    user.email = email
    user.first_name = payloads.text(data, "first_name")
    user.last_name = payloads.text(data, "last_name")
    user.role = payloads.text(data, "role", user.role)
    update_fields = ["email", "first_name", "last_name", "role", "updated_at"]
    # optional password change
    password = payloads.text(data, "password")
    if password:
        user.set_password(password)
        update_fields.append("password")

    try:
        user.save(update_fields=update_fields)
    except DatabaseError:
        logger.exception("user %s update failed", pk)
        return error("Error updating user", 500)
    return respond(user_to_dict(user))
