import unittest

from ptajournal.currency import Currency, CURRENCIES

class TestCurrency(unittest.TestCase):

    def test_currency(self):
        x = Currency.from_code_or_symbol("USD")
        self.assertEqual(x.entity, "UNITED STATES")
        self.assertEqual(x.currency, "US Dollar")
        self.assertEqual(x.alphabetic_code, "USD")
        self.assertEqual(x.numeric_code, 840)
        self.assertEqual(x.minor_unit, 2)
        self.assertEqual(x.symbol, "$")

    def test_symbol(self):
        self.assertEqual(Currency.from_code_or_symbol("$").alphabetic_code,
                         "USD")
        self.assertEqual(Currency.from_code_or_symbol("€").alphabetic_code,
                         "EUR")
        self.assertEqual(Currency.from_code_or_symbol("£").alphabetic_code,
                         "GBP")
        self.assertEqual(Currency.from_code_or_symbol("JPY").minor_unit, 0)
        self.assertEqual(Currency.from_code_or_symbol("KWD").minor_unit, 3)

    def test_unknown(self):
        self.assertIsNone(Currency.from_code_or_symbol(None))
        self.assertIsNone(Currency.from_code_or_symbol(""))
        self.assertIsNone(Currency.from_code_or_symbol("AAPL"))
        self.assertIsNone(Currency.from_code_or_symbol("usd"))

    def test_table(self):
        codes = [i.alphabetic_code for i in CURRENCIES]
        self.assertEqual(len(codes), len(set(codes)))
        symbols = [i.symbol for i in CURRENCIES if i.symbol]
        self.assertEqual(len(symbols), len(set(symbols)))

if __name__ == "__main__":
    unittest.main()
