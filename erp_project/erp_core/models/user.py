from django.contrib.auth.base_user import AbstractBaseUser
from django.db import models

from ..managers import UserManager
from .tenant import Tenant


# ---------- Tenant user ----------
class User(AbstractBaseUser):
    """
    API user. Credentials are tenant-scoped: the same email may exist
    once per tenant, so login always names the tenant.
    AbstractBaseUser brings `password` (hashed) and `last_login`.
    """

    tenant = models.ForeignKey(
        Tenant, on_delete=models.CASCADE, related_name="users")
    email = models.EmailField()
    first_name = models.CharField(max_length=150, blank=True, default="")
    last_name = models.CharField(max_length=150, blank=True, default="")
    # e.g. "admin", "accountant", "user"
    role = models.CharField(max_length=30, blank=True, default="user")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Enforce tenant scoping + hashed-password creation
    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["email"]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant", "email"], name="uq_tenant_user_email"
            )
        ]

    def __str__(self):
        return f"{self.email} @ {self.tenant_id}"
