from decimal import Decimal

from django.test import SimpleTestCase

from erp_core import payloads
from erp_core.exceptions import InvalidPayload


class DecimalPayloadTests(SimpleTestCase):

    def test_plain_amounts_parse_exactly(self):
        self.assertEqual(payloads.decimal({"v": 0.1}, "v"), Decimal("0.1"))
        self.assertEqual(payloads.decimal({"v": "1234.50"}, "v"), Decimal("1234.50"))
        self.assertEqual(payloads.decimal({}, "v"), Decimal("0.00"))

    def test_largest_amount_that_fits_the_column(self):
        self.assertEqual(payloads.decimal({"v": "9999999999999999.99"}, "v"),
                         Decimal("9999999999999999.99"))

    def test_non_finite_and_oversized_values_are_rejected(self):
        for bad in ("NaN", "sNaN", "Infinity", "-Infinity", float("inf"),
                    float("nan"), 1e20, "1e30", "10000000000000000.00",
                    True, "abc", [1]):
            with self.assertRaises(InvalidPayload, msg=repr(bad)):
                payloads.decimal({"v": bad}, "v")


class IntegerPayloadTests(SimpleTestCase):

    def test_whole_numbers_within_32_bits(self):
        self.assertEqual(payloads.integer({"v": 2147483647}, "v"), 2147483647)
        self.assertEqual(payloads.integer({"v": -2147483648}, "v"), -2147483648)
        self.assertEqual(payloads.integer({"v": 3.0}, "v"), 3)
        self.assertEqual(payloads.integer({"v": "12"}, "v"), 12)

    def test_out_of_range_or_fractional_values_are_rejected(self):
        for bad in (2 ** 31, -(2 ** 31) - 1, 2 ** 63, 1.5, float("inf"),
                    float("nan"), False, "x"):
            with self.assertRaises(InvalidPayload, msg=repr(bad)):
                payloads.integer({"v": bad}, "v")


class IdentifierPayloadTests(SimpleTestCase):

    def test_ids_as_numbers_or_numeric_strings(self):
        self.assertEqual(payloads.identifier({"id": 7}, "id"), 7)
        self.assertEqual(payloads.identifier({"id": "7"}, "id"), 7)
        self.assertEqual(payloads.identifier({"id": 7.0}, "id"), 7)
        self.assertIsNone(payloads.identifier({}, "id"))

    def test_fractional_or_oversized_ids_are_rejected(self):
        for bad in (1.9, "1.9", 2 ** 64, True):
            with self.assertRaises(InvalidPayload, msg=repr(bad)):
                payloads.identifier({"id": bad}, "id")
