import logging

from django.db.models import F
from django.utils import timezone

from ..db import atomic_scope
from ..models import (TRANSACTION_IN, TRANSACTION_OUT, InventoryTransaction,
                      Product)

logger = logging.getLogger(__name__)


def stock_delta(transaction_type: str, quantity: int) -> int:
    """Signed stock change for a movement: +q for IN, -q for OUT, else 0."""
    if transaction_type == TRANSACTION_IN:
        return quantity
    if transaction_type == TRANSACTION_OUT:
        return -quantity
    return 0


def apply_stock_delta(tenant_id, product_id, delta: int) -> int:
    """
    Add `delta` to the product's stock_quantity in the database.

    Relative update (stock_quantity = stock_quantity + delta), so concurrent
    callers serialize on the row instead of overwriting each other.
    Returns the number of rows updated.
    """
    return Product.objects.filter(tenant_id=tenant_id, pk=product_id).update(
        stock_quantity=F("stock_quantity") + delta,
        updated_at=timezone.now(),  # auto_now does not fire on .update()
    )


def create_inventory_transaction(txn: InventoryTransaction) -> InventoryTransaction:
    """
    Record a stock movement and adjust the product's counter in one unit.

    The transaction row and the stock change are kept together or not at
    all. No floor at zero: an OUT larger than stock drives it negative.
    `txn` gets its id and timestamps assigned in place.
    """
    delta = stock_delta(txn.transaction_type, txn.quantity)
    with atomic_scope():
        txn.save(force_insert=True)
        if delta:
            updated = apply_stock_delta(txn.tenant_id, txn.product_id, delta)
            if not updated:
                # product is not in this tenant: drop the movement too
                raise Product.DoesNotExist(
                    f"Product {txn.product_id} not found for tenant {txn.tenant_id}"
                )
    logger.info(
        "inventory transaction %s (%s %s) on product %s, stock delta %+d",
        txn.pk, txn.transaction_type, txn.quantity, txn.product_id, delta,
    )
    return txn


# ----------------------------
# Reads (newest first)
# ----------------------------
def get_inventory_transaction(tenant, txn_id):
    return InventoryTransaction.objects.get_scoped(tenant, txn_id)


def list_inventory_transactions(tenant):
    return list(
        InventoryTransaction.objects.for_tenant(tenant).order_by(
            "-created_at", "-id")
    )


def list_inventory_transactions_by_product(tenant, product_id):
    return list(
        InventoryTransaction.objects.for_tenant(tenant)
        .filter(product_id=product_id)
        .order_by("-created_at", "-id")
    )
