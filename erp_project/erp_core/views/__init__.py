from . import accounting, auth, crm, inventory, tenants, users
