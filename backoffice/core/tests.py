"""
Tests for shared display formatting
"""
from decimal import Decimal
from django.test import SimpleTestCase, override_settings
from backoffice.core.formatting import format_currency


@override_settings(CURRENCY_SYMBOL='₹')
class FormatCurrencyTests(SimpleTestCase):

    def test_none_is_not_available(self):
        self.assertEqual(format_currency(None), 'N/A')

    def test_thousands_separator_and_two_places(self):
        self.assertEqual(format_currency(1234.5), '₹1,234.50')
        self.assertEqual(format_currency(Decimal('1234567.891')), '₹1,234,567.89')

    def test_zero_and_integers(self):
        self.assertEqual(format_currency(0), '₹0.00')
        self.assertEqual(format_currency(120), '₹120.00')

    def test_rounds_half_up(self):
        self.assertEqual(format_currency(Decimal('2.345')), '₹2.35')
        self.assertEqual(format_currency('0.005'), '₹0.01')

    def test_negative_amount(self):
        self.assertEqual(format_currency(-1500), '-₹1,500.00')

    def test_negative_amount_rounding_to_zero_has_no_sign(self):
        self.assertEqual(format_currency(Decimal('-0.001')), '₹0.00')

    def test_custom_symbol(self):
        self.assertEqual(format_currency(99.9, symbol='Rs.'), 'Rs.99.90')

    @override_settings(CURRENCY_SYMBOL='$')
    def test_symbol_from_settings(self):
        self.assertEqual(format_currency(5), '$5.00')

    def test_invalid_amount_raises(self):
        with self.assertRaises(ValueError):
            format_currency('abc')
        with self.assertRaises(ValueError):
            format_currency(float('nan'))
