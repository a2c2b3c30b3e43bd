from django.db import models

from ..managers import TenantRegistryManager


# ---------- Tenant ----------
class Tenant(models.Model):
    """Tenant / Organization: the partition key of every other table."""

    # Store tenant's full display name
    name = models.CharField(max_length=200)

    # Routing identifier (e.g. "acme" for acme.example.com)
    subdomain = models.SlugField(
        max_length=80, unique=True  # no two tenants can share a subdomain
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantRegistryManager()

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
