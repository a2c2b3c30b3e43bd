from .account import Account
from .crm import Contact, Customer, Interaction
from .inventory import (TRANSACTION_IN, TRANSACTION_OUT, InventoryTransaction,
                        Product)
from .journal import JournalEntry, JournalEntryLine
from .tenant import Tenant
from .user import User
