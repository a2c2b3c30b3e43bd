from decimal import Decimal

from django.db import models

from ..managers import TenantManager
from .tenant import Tenant
from .user import User

# Transaction types that move stock; any other string is stored
# verbatim and leaves stock_quantity untouched
TRANSACTION_IN = "IN"
TRANSACTION_OUT = "OUT"


# ---------- Products (stock items) ----------
class Product(models.Model):  # Represents something a tenant sells & purchases
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    # Stock Keeping Unit, unique per tenant
    code = models.CharField(max_length=80)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    unit_price = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    # Quantity on hand. Cached sum of signed InventoryTransaction
    # quantities; may go negative. Product CRUD can still overwrite it.
    stock_quantity = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ["code"]
        # Ensure each code is unique within a tenant
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "code"], name="uq_tenant_product_code"
            )
        ]

    def __str__(self):
        return f"{self.code} {self.name}"


# ---------- Inventory transactions (immutable stock movements) ----------
class InventoryTransaction(models.Model):
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    # can't delete a product that has movements → PROTECT
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="transactions")
    # "IN" / "OUT" move stock; other values are accepted as-is
    transaction_type = models.CharField(max_length=30)
    # magnitude; the sign comes from transaction_type
    quantity = models.PositiveIntegerField(default=0)
    reference = models.CharField(max_length=200, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name="inventory_transactions",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        # newest first
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["tenant", "created_at"],
                         name="itx_tenant_created_idx"),
            models.Index(fields=["tenant", "product"],
                         name="itx_tenant_product_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.quantity} x {self.product_id}"
