from django.urls import path

from .views import accounting, auth, crm, inventory, tenants, users

app_name = "erp_core"

urlpatterns = [
    # Public routes
    path("auth/login", auth.login, name="login"),
    path("auth/register", auth.register, name="register"),
    path("tenants/<slug:subdomain>", tenants.tenant_by_subdomain,
         name="tenant-by-subdomain"),

    # Admin routes (token required, no tenant scoping)
    path("admin/tenants", tenants.tenant_collection, name="tenant-list"),
    path("admin/tenants/<int:pk>", tenants.tenant_detail, name="tenant-detail"),

    # Tenant routes (tenant taken from the token)
    path("users", users.user_collection, name="user-list"),
    path("users/<int:pk>", users.user_detail, name="user-detail"),

    path("accounting/accounts", accounting.account_collection,
         name="account-list"),
    path("accounting/accounts/<int:pk>", accounting.account_detail,
         name="account-detail"),
    path("accounting/journal-entries", accounting.journal_entry_collection,
         name="journal-entry-list"),
    path("accounting/journal-entries/<int:pk>",
         accounting.journal_entry_detail, name="journal-entry-detail"),

    path("inventory/products", inventory.product_collection,
         name="product-list"),
    path("inventory/products/<int:pk>", inventory.product_detail,
         name="product-detail"),
    path("inventory/transactions", inventory.transaction_collection,
         name="transaction-list"),
    path("inventory/transactions/<int:pk>", inventory.transaction_detail,
         name="transaction-detail"),
    path("inventory/transactions/product/<int:product_id>",
         inventory.transactions_by_product, name="transactions-by-product"),

    path("crm/customers", crm.customer_collection, name="customer-list"),
    path("crm/customers/<int:pk>", crm.customer_detail, name="customer-detail"),
    path("crm/customers/<int:customer_id>/contacts", crm.contacts_by_customer,
         name="contacts-by-customer"),
    path("crm/customers/<int:customer_id>/interactions",
         crm.interactions_by_customer, name="interactions-by-customer"),
    path("crm/contacts", crm.contact_create, name="contact-create"),
    path("crm/contacts/<int:pk>", crm.contact_detail, name="contact-detail"),
    path("crm/interactions", crm.interaction_create, name="interaction-create"),
    path("crm/interactions/<int:pk>", crm.interaction_detail,
         name="interaction-detail"),
]
