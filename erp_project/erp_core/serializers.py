"""Model -> JSON-ready dict converters (snake_case, numbers as numbers)."""


def _ts(value):
    return value.isoformat() if value is not None else None


def _number(value):
    # Decimal -> JSON number
    return float(value) if value is not None else None


def tenant_to_dict(tenant):
    return {
        "id": tenant.pk,
        "name": tenant.name,
        "subdomain": tenant.subdomain,
        "created_at": _ts(tenant.created_at),
        "updated_at": _ts(tenant.updated_at),
    }


def user_to_dict(user):
    # password hash never leaves the server
    return {
        "id": user.pk,
        "tenant_id": user.tenant_id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "created_at": _ts(user.created_at),
        "updated_at": _ts(user.updated_at),
    }


def account_to_dict(account):
    return {
        "id": account.pk,
        "tenant_id": account.tenant_id,
        "code": account.code,
        "name": account.name,
        "type": account.type,
        "description": account.description,
        "created_at": _ts(account.created_at),
        "updated_at": _ts(account.updated_at),
    }


def journal_line_to_dict(line):
    return {
        "id": line.pk,
        "tenant_id": line.tenant_id,
        "journal_entry_id": line.journal_entry_id,
        "account_id": line.account_id,
        "description": line.description,
        "debit": _number(line.debit),
        "credit": _number(line.credit),
        "created_at": _ts(line.created_at),
        "updated_at": _ts(line.updated_at),
    }


def journal_entry_to_dict(entry):
    return {
        "id": entry.pk,
        "tenant_id": entry.tenant_id,
        "entry_date": entry.entry_date.isoformat(),
        "reference": entry.reference,
        "description": entry.description,
        "created_by": entry.created_by_id,
        "lines": [journal_line_to_dict(line) for line in entry.lines.all()],
        "created_at": _ts(entry.created_at),
        "updated_at": _ts(entry.updated_at),
    }


def product_to_dict(product):
    return {
        "id": product.pk,
        "tenant_id": product.tenant_id,
        "code": product.code,
        "name": product.name,
        "description": product.description,
        "unit_price": _number(product.unit_price),
        "stock_quantity": product.stock_quantity,
        "created_at": _ts(product.created_at),
        "updated_at": _ts(product.updated_at),
    }


def inventory_transaction_to_dict(txn):
    return {
        "id": txn.pk,
        "tenant_id": txn.tenant_id,
        "product_id": txn.product_id,
        "transaction_type": txn.transaction_type,
        "quantity": txn.quantity,
        "reference": txn.reference,
        "notes": txn.notes,
        "created_by": txn.created_by_id,
        "created_at": _ts(txn.created_at),
        "updated_at": _ts(txn.updated_at),
    }


def contact_to_dict(contact):
    return {
        "id": contact.pk,
        "tenant_id": contact.tenant_id,
        "customer_id": contact.customer_id,
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "email": contact.email,
        "phone": contact.phone,
        "position": contact.position,
        "created_at": _ts(contact.created_at),
        "updated_at": _ts(contact.updated_at),
    }


def customer_to_dict(customer, contacts=None):
    data = {
        "id": customer.pk,
        "tenant_id": customer.tenant_id,
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
        "created_at": _ts(customer.created_at),
        "updated_at": _ts(customer.updated_at),
    }
    # contacts only on the detail view
    if contacts is not None:
        data["contacts"] = [contact_to_dict(c) for c in contacts]
    return data


def interaction_to_dict(interaction):
    return {
        "id": interaction.pk,
        "tenant_id": interaction.tenant_id,
        "customer_id": interaction.customer_id,
        "contact_id": interaction.contact_id,
        "interaction_type": interaction.interaction_type,
        "description": interaction.description,
        "interaction_date": _ts(interaction.interaction_date),
        "created_by": interaction.created_by_id,
        "created_at": _ts(interaction.created_at),
        "updated_at": _ts(interaction.updated_at),
    }
