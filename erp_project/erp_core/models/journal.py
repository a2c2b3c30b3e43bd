from decimal import Decimal

from django.db import models

from ..managers import TenantManager
from .account import Account
from .tenant import Tenant
from .user import User


# ---------- Journal (Header) & JournalEntryLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    # Multi-tenant: every entry belongs to a tenant
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    # Business metadata
    entry_date = models.DateField()
    reference = models.CharField(max_length=200, blank=True, default="")
    description = models.TextField(blank=True, default="")
    # Track user who created it
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name="journal_entries",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        # newest business date first
        ordering = ["-entry_date", "-id"]
        indexes = [
            models.Index(fields=["tenant", "entry_date"], name="je_tenant_date_idx"),
        ]

    def __str__(self):
        return f"JE {self.pk} {self.entry_date}"


class JournalEntryLine(models.Model):  # Stores Lines ( credits / debits )
    """
    Each line belongs to exactly one journal entry and points to a ledger
    account. Lines are only written as part of their entry's create or
    update; they have no lifecycle of their own.
    """

    # tenant duplicated from the parent for direct scoping
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    # can't delete an account if lines exist → PROTECT
    account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="journal_lines")

    description = models.CharField(max_length=400, blank=True, default="")
    debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        # insertion order
        ordering = ["id"]
        indexes = [
            models.Index(fields=["tenant", "journal_entry"],
                         name="jel_tenant_entry_idx"),
            models.Index(fields=["tenant", "account"],
                         name="jel_tenant_account_idx"),
        ]
        # Amounts are magnitudes; the side is given by the column
        constraints = [
            models.CheckConstraint(
                condition=models.Q(debit__gte=0),
                name="ck_jel_debit_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(credit__gte=0),
                name="ck_jel_credit_non_negative",
            ),
        ]

    def __str__(self):
        return f"JE {self.journal_entry_id} / {self.account_id}: {self.debit} / {self.credit}"
