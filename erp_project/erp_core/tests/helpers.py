from decimal import Decimal

from django.db.models import Sum
from django.test import TestCase, override_settings

from erp_core.models import JournalEntryLine, Tenant, User
from erp_core.tokens import issue_token

# PBKDF2 is deliberately slow; tests only need a working hasher
FAST_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


def make_tenant(name="Acme", subdomain="acme"):
    return Tenant.objects.create(name=name, subdomain=subdomain)


def make_user(tenant, email="owner@acme.test", password="secret", role="admin"):
    return User.objects.create_user(tenant, email, password, role=role)


def entry_totals(entry):
    """Return (debits, credits) summed over the entry's stored lines"""
    aggs = JournalEntryLine.objects.filter(journal_entry=entry).aggregate(
        total_debit=Sum("debit"), total_credit=Sum("credit"))
    return (
        aggs["total_debit"] or Decimal("0.00"),
        aggs["total_credit"] or Decimal("0.00"),
    )


@override_settings(PASSWORD_HASHERS=FAST_HASHERS)
class ApiTestCase(TestCase):
    """TestCase with one tenant, one user and a bearer token for them."""

    def setUp(self):
        self.tenant = make_tenant()
        self.user = make_user(self.tenant)
        self.token = issue_token(self.user)

    # request helpers: JSON bodies + Authorization header
    def auth(self, token=None):
        return {"HTTP_AUTHORIZATION": f"Bearer {token or self.token}"}

    def get(self, url, token=None):
        return self.client.get(url, **self.auth(token))

    def post(self, url, data, token=None):
        return self.client.post(
            url, data, content_type="application/json", **self.auth(token))

    def put(self, url, data, token=None):
        return self.client.put(
            url, data, content_type="application/json", **self.auth(token))

    def delete(self, url, token=None):
        return self.client.delete(url, **self.auth(token))
