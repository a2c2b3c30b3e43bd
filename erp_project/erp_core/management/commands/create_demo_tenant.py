import datetime
from decimal import Decimal

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.text import slugify

from erp_core.models import (TRANSACTION_IN, Account, Customer, Contact,
                             InventoryTransaction, JournalEntry,
                             JournalEntryLine, Product, Tenant, User)
from erp_core.services import (create_inventory_transaction,
                               create_journal_entry)


class Command(BaseCommand):
    help = (
        "Create a demo tenant with an admin user, a small chart of accounts, "
        "products and one posted journal entry."
    )

    # Define command-line arguments
    def add_arguments(self, parser):
        parser.add_argument(
            "--tenant-name",
            default="Demo Company",
            help="Name of the demo tenant to create.",
        )
        parser.add_argument(
            "--subdomain",
            default=None,
            help="Subdomain for the tenant (defaults to a slug of the name).",
        )
        parser.add_argument(
            "--email", default="admin@example.com", help="Email of the admin user."
        )
        parser.add_argument(
            "--password", default="demo123", help="Password for the admin user."
        )

    @transaction.atomic
    def handle(self, *args, **options):
        tenant_name = options["tenant_name"]
        subdomain = options["subdomain"] or slugify(tenant_name) or "demo"
        email = options["email"]
        password = options["password"]

        # 1. Tenant (re-running the command reuses it)
        tenant, created = Tenant.objects.get_or_create(
            subdomain=subdomain, defaults={"name": tenant_name}
        )
        if not created and tenant.name != tenant_name:
            raise CommandError(
                f"Subdomain '{subdomain}' already belongs to '{tenant.name}'"
            )
        self.stdout.write(self.style.SUCCESS(f"Tenant: {tenant} ({tenant.subdomain})"))

        # 2. Admin user
        user = User.objects.get_by_email(tenant, email)
        if user is None:
            user = User.objects.create_user(
                tenant, email, password,
                first_name="Demo", last_name="Admin", role="admin",
            )
        self.stdout.write(self.style.SUCCESS(f"User: {user.email} (pw={password})"))

        # 3. Chart of accounts
        cash, _ = Account.objects.get_or_create(
            tenant=tenant, code="1000",
            defaults={"name": "Cash", "type": "asset"},
        )
        Account.objects.get_or_create(
            tenant=tenant, code="1200",
            defaults={"name": "Inventory", "type": "asset"},
        )
        equity, _ = Account.objects.get_or_create(
            tenant=tenant, code="3000",
            defaults={"name": "Owner's Equity", "type": "equity"},
        )
        Account.objects.get_or_create(
            tenant=tenant, code="4000",
            defaults={"name": "Sales Revenue", "type": "income"},
        )
        self.stdout.write(self.style.SUCCESS("Accounts ready"))

        # 4. Opening balance, posted once
        if not JournalEntry.objects.for_tenant(tenant).filter(
                reference="OPENING").exists():
            entry = JournalEntry(
                tenant=tenant,
                entry_date=datetime.date.today(),
                reference="OPENING",
                description="Owner capital contribution",
                created_by=user,
            )
            create_journal_entry(entry, [
                JournalEntryLine(account=cash, debit=Decimal("10000.00"),
                                 description="Cash received"),
                JournalEntryLine(account=equity, credit=Decimal("10000.00"),
                                 description="Owner capital"),
            ])
            self.stdout.write(self.style.SUCCESS(f"Journal entry {entry.pk} posted"))

        # 5. Products with initial stock received through a movement
        widget, created = Product.objects.get_or_create(
            tenant=tenant, code="WID-001",
            defaults={"name": "Widget", "unit_price": Decimal("19.99")},
        )
        if created:
            create_inventory_transaction(InventoryTransaction(
                tenant=tenant, product=widget,
                transaction_type=TRANSACTION_IN, quantity=100,
                reference="INITIAL", notes="Opening stock", created_by=user,
            ))
        Product.objects.get_or_create(
            tenant=tenant, code="GAD-001",
            defaults={"name": "Gadget", "unit_price": Decimal("49.50")},
        )
        self.stdout.write(self.style.SUCCESS("Products ready"))

        # 6. One customer with a contact
        customer, created = Customer.objects.get_or_create(
            tenant=tenant, name="Acme Corp",
            defaults={"email": "info@acme.example"},
        )
        if created:
            Contact.objects.create(
                tenant=tenant, customer=customer,
                first_name="Jane", last_name="Doe", position="Buyer",
            )

        self.stdout.write(self.style.SUCCESS("Demo tenant setup complete."))
