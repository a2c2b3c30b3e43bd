import logging

from django.db import DatabaseError
from django.views.decorators.http import (require_GET, require_http_methods,
                                          require_POST)

from .. import payloads
from ..exceptions import InvalidPayload
from ..middleware import token_required
from ..models import Contact, Customer, Interaction
from ..serializers import (contact_to_dict, customer_to_dict,
                           interaction_to_dict)
from .common import deleted, error, json_errors, not_found, respond

logger = logging.getLogger(__name__)

CONTACT_FIELDS_REQUIRED = "Customer ID, first name and last name are required"
INTERACTION_FIELDS_REQUIRED = "Customer ID, interaction type and date are required"


# ---------- Customers ----------
def _apply_customer_payload(customer, data):
    payloads.require(data, ("name",), "Name is required")
    customer.name = payloads.text(data, "name")
    customer.email = payloads.text(data, "email")
    customer.phone = payloads.text(data, "phone")
    customer.address = payloads.text(data, "address")


@require_http_methods(["GET", "POST"])
@token_required
@json_errors
def customer_collection(request):
    tenant_id = request.tenant_id

    if request.method == "GET":
        customers = Customer.objects.for_tenant(tenant_id).order_by("name")
        return respond([customer_to_dict(c) for c in customers])

    customer = Customer(tenant_id=tenant_id)
    _apply_customer_payload(customer, payloads.parse_json(request))
    try:
        customer.save(force_insert=True)
    except DatabaseError:
        logger.exception("customer create failed for tenant %s", tenant_id)
        return error("Error creating customer", 500)
    return respond(customer_to_dict(customer), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def customer_detail(request, pk):
    tenant_id = request.tenant_id
    customer = Customer.objects.get_scoped(tenant_id, pk)
    if customer is None:
        return not_found("Customer")

    if request.method == "GET":
        # detail view embeds the customer's contacts
        contacts = Contact.objects.for_tenant(tenant_id).filter(
            customer=customer).order_by("last_name", "first_name")
        return respond(customer_to_dict(customer, contacts=contacts))

    if request.method == "DELETE":
        try:
            customer.delete()
        except DatabaseError:
            logger.exception("customer %s delete failed", pk)
            return error("Error deleting customer", 500)
        return deleted("Customer")

    _apply_customer_payload(customer, payloads.parse_json(request))
    try:
        customer.save(update_fields=[
            "name", "email", "phone", "address", "updated_at"])
    except DatabaseError:
        logger.exception("customer %s update failed", pk)
        return error("Error updating customer", 500)
    return respond(customer_to_dict(customer))


# ---------- Contacts ----------
def _apply_contact_payload(contact, data):
    payloads.require(data, ("customer_id", "first_name", "last_name"),
                     CONTACT_FIELDS_REQUIRED)
    contact.customer_id = payloads.identifier(data, "customer_id")
    contact.first_name = payloads.text(data, "first_name")
    contact.last_name = payloads.text(data, "last_name")
    contact.email = payloads.text(data, "email")
    contact.phone = payloads.text(data, "phone")
    contact.position = payloads.text(data, "position")


@require_POST
@token_required
@json_errors
def contact_create(request):
    tenant_id = request.tenant_id
    contact = Contact(tenant_id=tenant_id)
    _apply_contact_payload(contact, payloads.parse_json(request))
    # the customer must exist in the caller's tenant
    if Customer.objects.get_scoped(tenant_id, contact.customer_id) is None:
        return not_found("Customer")

    try:
        contact.save(force_insert=True)
    except DatabaseError:
        logger.exception("contact create failed for tenant %s", tenant_id)
        return error("Error creating contact", 500)
    return respond(contact_to_dict(contact), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def contact_detail(request, pk):
    tenant_id = request.tenant_id
    contact = Contact.objects.get_scoped(tenant_id, pk)
    if contact is None:
        return not_found("Contact")

    if request.method == "GET":
        return respond(contact_to_dict(contact))

    if request.method == "DELETE":
        try:
            contact.delete()
        except DatabaseError:
            logger.exception("contact %s delete failed", pk)
            return error("Error deleting contact", 500)
        return deleted("Contact")

    _apply_contact_payload(contact, payloads.parse_json(request))
    if Customer.objects.get_scoped(tenant_id, contact.customer_id) is None:
        return not_found("Customer")
    try:
        contact.save(update_fields=[
            "customer", "first_name", "last_name", "email", "phone",
            "position", "updated_at"])
    except DatabaseError:
        logger.exception("contact %s update failed", pk)
        return error("Error updating contact", 500)
    return respond(contact_to_dict(contact))


@require_GET
@token_required
def contacts_by_customer(request, customer_id):
    contacts = Contact.objects.for_tenant(request.tenant_id).filter(
        customer_id=customer_id).order_by("last_name", "first_name")
    return respond([contact_to_dict(c) for c in contacts])


# ---------- Interactions ----------
def _apply_interaction_payload(interaction, data, tenant_id):
    payloads.require(data, ("customer_id", "interaction_type", "interaction_date"),
                     INTERACTION_FIELDS_REQUIRED)
    interaction.customer_id = payloads.identifier(data, "customer_id")
    interaction.interaction_type = payloads.text(data, "interaction_type")
    interaction.description = payloads.text(data, "description")
    interaction.interaction_date = payloads.datetime_value(data, "interaction_date")

    # Optional contact: must belong to the same customer
    contact_id = payloads.identifier(data, "contact_id")
    if contact_id is not None:
        contact = Contact.objects.get_scoped(tenant_id, contact_id)
        if contact is None or contact.customer_id != interaction.customer_id:
            raise InvalidPayload("Contact does not belong to this customer")
    interaction.contact_id = contact_id


@require_POST
@token_required
@json_errors
def interaction_create(request):
    tenant_id = request.tenant_id
    interaction = Interaction(tenant_id=tenant_id, created_by_id=request.user_id)
    data = payloads.parse_json(request)
    payloads.require(data, ("customer_id",), INTERACTION_FIELDS_REQUIRED)
    if Customer.objects.get_scoped(
            tenant_id, payloads.identifier(data, "customer_id")) is None:
        return not_found("Customer")
    _apply_interaction_payload(interaction, data, tenant_id)

    try:
        interaction.save(force_insert=True)
    except DatabaseError:
        logger.exception("interaction create failed for tenant %s", tenant_id)
        return error("Error creating interaction", 500)
    return respond(interaction_to_dict(interaction), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def interaction_detail(request, pk):
    tenant_id = request.tenant_id
    interaction = Interaction.objects.get_scoped(tenant_id, pk)
    if interaction is None:
        return not_found("Interaction")

    if request.method == "GET":
        return respond(interaction_to_dict(interaction))

    if request.method == "DELETE":
        try:
            interaction.delete()
        except DatabaseError:
            logger.exception("interaction %s delete failed", pk)
            return error("Error deleting interaction", 500)
        return deleted("Interaction")

    data = payloads.parse_json(request)
    payloads.require(data, ("customer_id",), INTERACTION_FIELDS_REQUIRED)
    if Customer.objects.get_scoped(
            tenant_id, payloads.identifier(data, "customer_id")) is None:
        return not_found("Customer")
    _apply_interaction_payload(interaction, data, tenant_id)
    try:
        interaction.save(update_fields=[
            "customer", "contact", "interaction_type", "description",
            "interaction_date", "updated_at"])
    except DatabaseError:
        logger.exception("interaction %s update failed", pk)
        return error("Error updating interaction", 500)
    return respond(interaction_to_dict(interaction))


@require_GET
@token_required
def interactions_by_customer(request, customer_id):
    interactions = Interaction.objects.for_tenant(request.tenant_id).filter(
        customer_id=customer_id).order_by("-interaction_date", "-id")
    return respond([interaction_to_dict(i) for i in interactions])
