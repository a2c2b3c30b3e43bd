from django.contrib.auth.base_user import BaseUserManager
from django.db import models


# -----------------------------------------
# Enforce tenant scoping across all models
# that belong to a tenant
# -----------------------------------------
class TenantQuerySet(models.QuerySet):
    def for_tenant(self, tenant):
        # accept a Tenant instance or a raw tenant id (from token claims)
        return self.filter(tenant=tenant)

    def get_scoped(self, tenant, pk):
        """Return the row matching tenant + pk, or None when absent."""
        if pk is None:
            return None
        try:
            return self.for_tenant(tenant).get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            # a non-numeric id can never match a row
            return None


# Attach TenantQuerySet to .objects
class TenantManager(models.Manager.from_queryset(TenantQuerySet)):
    pass


class TenantRegistryManager(models.Manager):
    """Lookups for the Tenant table itself (no tenant column to scope by)."""

    def get_by_id(self, pk):
        try:
            return self.get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            return None

    def get_by_subdomain(self, subdomain):
        return self.filter(subdomain=subdomain).first()


# Tenant scoping plus the user-creation rules
class UserManager(BaseUserManager.from_queryset(TenantQuerySet)):
    use_in_migrations = True

    def create_user(self, tenant, email, password=None, **extra_fields):
        if not email:  # Email is required
            raise ValueError("The given email must be set")
        email = self.normalize_email(email)
        # tenant may be a Tenant or a raw id taken from token claims
        if isinstance(tenant, models.Model):
            extra_fields["tenant"] = tenant
        else:
            extra_fields["tenant_id"] = tenant
        user = self.model(email=email, **extra_fields)
        user.set_password(password)  # Password is hashed
        user.save(using=self._db)
        return user

    def get_by_email(self, tenant, email):
        return self.for_tenant(tenant).filter(
            email=self.normalize_email(email)).first()

    def authenticate(self, tenant, email, password):
        """Return the user when email + password match inside tenant, else None."""
        user = self.get_by_email(tenant, email)
        if user is None:
            return None
        if not user.check_password(password):
            return None
        return user
