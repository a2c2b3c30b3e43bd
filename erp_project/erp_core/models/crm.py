from django.db import models

from ..managers import TenantManager
from .tenant import Tenant
from .user import User


# ---------- Customer ----------
class Customer(models.Model):
    # Multi-tenant: every customer belongs to a single tenant.
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    # The customer's legal or trade name
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    address = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tenant", "name"], name="cust_tenant_name_idx")]

    def __str__(self):
        return self.name


# ---------- Contact person at a customer ----------
class Contact(models.Model):
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    # contacts go away with their customer
    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="contacts")
    first_name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    position = models.CharField(max_length=150, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        ordering = ["last_name", "first_name"]
        indexes = [
            models.Index(fields=["tenant", "customer"], name="contact_tenant_cust_idx")]

    def __str__(self):
        return f"{self.first_name} {self.last_name}"


# ---------- Interaction log (calls, meetings, emails) ----------
class Interaction(models.Model):
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE)
    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="interactions")
    # Optional: the person we talked to
    contact = models.ForeignKey(
        Contact, null=True, blank=True, on_delete=models.SET_NULL,
        related_name="interactions",
    )
    interaction_type = models.CharField(max_length=50)
    description = models.TextField(blank=True, default="")
    interaction_date = models.DateTimeField()
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL,
        related_name="interactions",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        ordering = ["-interaction_date", "-id"]
        indexes = [
            models.Index(fields=["tenant", "customer"], name="inter_tenant_cust_idx")]

    def __str__(self):
        return f"{self.interaction_type} with {self.customer_id} on {self.interaction_date:%Y-%m-%d}"
