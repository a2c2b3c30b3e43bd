import logging

from django.db import DatabaseError
from django.db.models import ProtectedError
from django.views.decorators.http import require_GET, require_http_methods

from .. import payloads
from ..exceptions import Conflict, InvalidPayload
from ..middleware import token_required
from ..models import InventoryTransaction, Product
from ..serializers import inventory_transaction_to_dict, product_to_dict
from ..services import inventory as inventory_service
from .common import deleted, error, json_errors, not_found, respond

logger = logging.getLogger(__name__)


# ----------------------------
# Products
# ----------------------------
def _apply_product_payload(product, data):
    payloads.require(data, ("code", "name"), "Code and name are required")
    product.code = payloads.text(data, "code")
    product.name = payloads.text(data, "name")
    product.description = payloads.text(data, "description")
    product.unit_price = payloads.decimal(data, "unit_price", product.unit_price)
    # Direct edit of the counter, outside the transaction log
    product.stock_quantity = payloads.integer(
        data, "stock_quantity", product.stock_quantity)
    clash = Product.objects.for_tenant(product.tenant_id).filter(
        code=product.code).exclude(pk=product.pk).exists()
    if clash:
        raise Conflict("Product with this code already exists")


@require_http_methods(["GET", "POST"])
@token_required
@json_errors
def product_collection(request):
    tenant_id = request.tenant_id

    if request.method == "GET":
        products = Product.objects.for_tenant(tenant_id).order_by("code")
        return respond([product_to_dict(p) for p in products])

    product = Product(tenant_id=tenant_id)
    _apply_product_payload(product, payloads.parse_json(request))
    try:
        product.save(force_insert=True)
    except DatabaseError:
        logger.exception("product create failed for tenant %s", tenant_id)
        return error("Error creating product", 500)
    return respond(product_to_dict(product), status=201)


@require_http_methods(["GET", "PUT", "DELETE"])
@token_required
@json_errors
def product_detail(request, pk):
    product = Product.objects.get_scoped(request.tenant_id, pk)
    if product is None:
        return not_found("Product")

    if request.method == "GET":
        return respond(product_to_dict(product))

    if request.method == "DELETE":
        try:
            product.delete()
        except ProtectedError:
            return error("Product has inventory transactions", 409)
        except DatabaseError:
            logger.exception("product %s delete failed", pk)
            return error("Error deleting product", 500)
        return deleted("Product")

    _apply_product_payload(product, payloads.parse_json(request))
    try:
        product.save(update_fields=[
            "code", "name", "description", "unit_price", "stock_quantity",
            "updated_at"])
    except DatabaseError:
        logger.exception("product %s update failed", pk)
        return error("Error updating product", 500)
    return respond(product_to_dict(product))


# ----------------------------
# Inventory transactions
# ----------------------------
@require_http_methods(["GET", "POST"])
@token_required
@json_errors
def transaction_collection(request):
    tenant_id = request.tenant_id

    if request.method == "GET":
        try:
            txns = inventory_service.list_inventory_transactions(tenant_id)
        except DatabaseError:
            logger.exception("transaction list failed for tenant %s", tenant_id)
            return error("Error listing transactions", 500)
        return respond([inventory_transaction_to_dict(t) for t in txns])

    data = payloads.parse_json(request)
    payloads.require(data, ("product_id", "transaction_type"),
                     "Product ID and transaction type are required")
    quantity = payloads.integer(data, "quantity")
    if quantity < 0:
        raise InvalidPayload("Quantity must be non-negative")

    product = Product.objects.get_scoped(
        tenant_id, payloads.identifier(data, "product_id"))
    if product is None:
        return not_found("Product")

    txn = InventoryTransaction(
        tenant_id=tenant_id,
        product=product,
        transaction_type=payloads.text(data, "transaction_type"),
        quantity=quantity,
        reference=payloads.text(data, "reference"),
        notes=payloads.text(data, "notes"),
        created_by_id=request.user_id,
    )
    try:
        inventory_service.create_inventory_transaction(txn)
    except (DatabaseError, Product.DoesNotExist):
        logger.exception("transaction create failed for tenant %s", tenant_id)
        return error("Error creating transaction", 500)
    return respond(inventory_transaction_to_dict(txn), status=201)


@require_GET
@token_required
def transaction_detail(request, pk):
    txn = inventory_service.get_inventory_transaction(request.tenant_id, pk)
    if txn is None:
        return not_found("Transaction")
    return respond(inventory_transaction_to_dict(txn))


@require_GET
@token_required
def transactions_by_product(request, product_id):
    try:
        txns = inventory_service.list_inventory_transactions_by_product(
            request.tenant_id, product_id)
    except DatabaseError:
        logger.exception("transaction list failed for product %s", product_id)
        return error("Error listing transactions", 500)
    return respond([inventory_transaction_to_dict(t) for t in txns])
