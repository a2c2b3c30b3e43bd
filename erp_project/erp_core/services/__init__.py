from .inventory import (apply_stock_delta, create_inventory_transaction,
                        get_inventory_transaction,
                        list_inventory_transactions,
                        list_inventory_transactions_by_product, stock_delta)
from .journal import (create_journal_entry, delete_journal_entry,
                      get_journal_entry, list_journal_entries,
                      update_journal_entry)
