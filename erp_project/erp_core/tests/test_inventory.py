import threading
import unittest
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError, connection, connections
from django.db.models.deletion import ProtectedError
from django.test import TestCase, TransactionTestCase
from django.test.utils import CaptureQueriesContext

from erp_core.models import InventoryTransaction, Product
from erp_core.services import (create_inventory_transaction,
                               get_inventory_transaction,
                               list_inventory_transactions,
                               list_inventory_transactions_by_product,
                               stock_delta)
from erp_core.tests.helpers import make_tenant


class StockDeltaTests(TestCase):

    def test_in_adds_out_subtracts_anything_else_is_zero(self):
        self.assertEqual(stock_delta("IN", 7), 7)
        self.assertEqual(stock_delta("OUT", 7), -7)
        self.assertEqual(stock_delta("ADJUST", 7), 0)
        # type names are case-sensitive
        self.assertEqual(stock_delta("in", 7), 0)


class InventoryTransactionWriteTests(TestCase):

    def setUp(self):
        self.tenant = make_tenant()
        self.product = Product.objects.create(
            tenant=self.tenant, code="WID-1", name="Widget",
            unit_price=Decimal("9.99"), stock_quantity=100,
        )

    def _move(self, transaction_type, quantity, product=None, **kwargs):
        txn = InventoryTransaction(
            tenant=self.tenant,
            product=product or self.product,
            transaction_type=transaction_type,
            quantity=quantity,
            **kwargs,
        )
        return create_inventory_transaction(txn)

    def _stock(self):
        return Product.objects.get(pk=self.product.pk).stock_quantity

    def test_out_then_in_adjusts_stock_and_lists_newest_first(self):
        out = self._move("OUT", 30, reference="SO-1")
        self.assertEqual(self._stock(), 70)

        received = self._move("IN", 10, reference="PO-1")
        self.assertEqual(self._stock(), 80)

        listed = list_inventory_transactions_by_product(
            self.tenant, self.product.pk)
        self.assertEqual([t.pk for t in listed], [received.pk, out.pk])

    def test_other_types_are_recorded_without_touching_stock(self):
        txn = self._move("ADJUST", 25, notes="cycle count")

        self.assertIsNotNone(get_inventory_transaction(self.tenant, txn.pk))
        self.assertEqual(self._stock(), 100)

    def test_out_beyond_stock_goes_negative(self):
        self._move("OUT", 130)
        self.assertEqual(self._stock(), -30)

    def test_zero_quantity_is_accepted(self):
        txn = self._move("IN", 0)
        self.assertIsNotNone(txn.pk)
        self.assertEqual(self._stock(), 100)

    def test_stale_product_instance_does_not_lose_updates(self):
        # both movements built from the same in-memory product (stock=100)
        stale = Product.objects.get(pk=self.product.pk)
        self._move("IN", 5, product=stale)
        self._move("IN", 5, product=stale)

        # the in-memory copy is untouched; the row has both deltas
        self.assertEqual(stale.stock_quantity, 100)
        self.assertEqual(self._stock(), 110)

    def test_stock_change_is_a_single_relative_update(self):
        table = Product._meta.db_table
        with CaptureQueriesContext(connection) as ctx:
            self._move("IN", 4)

        statements = [q["sql"] for q in ctx.captured_queries]
        updates = [s for s in statements
                   if s.startswith("UPDATE") and table in s]
        self.assertEqual(len(updates), 1)
        # the counter is computed in SQL from its current value
        self.assertIn('"stock_quantity" + ', updates[0])
        # and never read back into Python first
        self.assertFalse([s for s in statements
                          if s.startswith("SELECT") and table in s])
        self.assertEqual(self._stock(), 104)

    def test_failed_stock_update_drops_the_transaction_row(self):
        with mock.patch("erp_core.services.inventory.apply_stock_delta",
                        side_effect=DatabaseError("lock timeout")):
            with self.assertRaises(DatabaseError):
                self._move("IN", 10)

        self.assertFalse(
            InventoryTransaction.objects.for_tenant(self.tenant).exists())
        self.assertEqual(self._stock(), 100)

    def test_product_of_another_tenant_rolls_back(self):
        other = make_tenant(name="Other", subdomain="other")
        foreign = Product.objects.create(
            tenant=other, code="X-1", name="Foreign", stock_quantity=5)

        with self.assertRaises(Product.DoesNotExist):
            self._move("OUT", 1, product=foreign)

        self.assertFalse(InventoryTransaction.objects.exists())
        foreign.refresh_from_db()
        self.assertEqual(foreign.stock_quantity, 5)

    def test_product_with_transactions_cannot_be_deleted(self):
        self._move("IN", 1)
        with self.assertRaises(ProtectedError):
            self.product.delete()

    def test_reads_are_scoped_to_tenant(self):
        txn = self._move("IN", 3)
        other = make_tenant(name="Other", subdomain="other")

        self.assertIsNone(get_inventory_transaction(other, txn.pk))
        self.assertEqual(list_inventory_transactions(other), [])
        self.assertEqual(
            list_inventory_transactions_by_product(other, self.product.pk), [])
        self.assertEqual(
            [t.pk for t in list_inventory_transactions(self.tenant)], [txn.pk])


@unittest.skipUnless(connection.vendor == "postgresql",
                     "row-level locking needs PostgreSQL")
class ConcurrentStockUpdateTests(TransactionTestCase):

    def test_parallel_movements_all_apply(self):
        tenant = make_tenant()
        product = Product.objects.create(
            tenant=tenant, code="C-1", name="Contended", stock_quantity=0)
        errors = []

        def worker(kind):
            try:
                for _ in range(10):
                    create_inventory_transaction(InventoryTransaction(
                        tenant_id=tenant.pk, product_id=product.pk,
                        transaction_type=kind, quantity=1,
                    ))
            except Exception as exc:  # surfaced through `errors`
                errors.append(exc)
            finally:
                connections.close_all()

        threads = [threading.Thread(target=worker, args=(kind,))
                   for kind in ("IN", "IN", "IN", "OUT")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        product.refresh_from_db()
        # 30 in, 10 out
        self.assertEqual(product.stock_quantity, 20)
        self.assertEqual(
            InventoryTransaction.objects.filter(product=product).count(), 40)
