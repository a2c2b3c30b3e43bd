from django.db import models

from ..managers import TenantManager
from .tenant import Tenant

# Used by Account.type to classify general ledger accounts
AC_TYPES = [
    ("asset", "Asset"),
    ("liability", "Liability"),
    ("equity", "Equity"),
    ("income", "Income"),
    ("expense", "Expense"),
]


class Account(models.Model):
    """
    Ledger account in the chart of accounts.
    - code is unique per tenant
    - type is free text on the wire; AC_TYPES lists the usual values
    """

    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    # Every account has a code
    # which lets you sort/group accounts consistently in reports.
    code = models.CharField(max_length=32)
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=30)
    description = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ["code"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "code"], name="uq_tenant_account_code"
            )
        ]

    def __str__(self):
        return f"{self.code} {self.name}"
