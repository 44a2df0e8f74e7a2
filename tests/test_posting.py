import unittest
from datetime import date

from ptajournal.commodity import Commodity
from ptajournal.complex_commodity import ComplexCommodity
from ptajournal.ledger import PostingError
from ptajournal.parser import ParseError
from ptajournal.posting import Posting, Transfer, Tag

class TestTag(unittest.TestCase):

    def test_from_s(self):
        x = Tag.from_s("Vacation: Seattle")
        self.assertEqual((x.key, x.value), ("Vacation", "Seattle"))
        self.assertEqual(str(x), "Vacation: Seattle")
        x = Tag.from_s("fabric:wool")
        self.assertEqual(str(x), "fabric: wool")
        x = Tag.from_s("SmallBusiness")
        self.assertEqual((x.key, x.value), ("SmallBusiness", None))
        self.assertEqual(str(x), "SmallBusiness")
        self.assertEqual(Tag.from_s("a : b"), Tag("a", "b"))

class TestPosting(unittest.TestCase):

    def test_to_ledger(self):
        posting = Posting(date(2021, 10, 2), "Heroes R Us",
            tags=[Tag.from_s("Vacation: Seattle")],
            transfers=[
                Transfer("Expenses:Comics", Commodity.parse("$ 5.00"),
                         tags=[Tag.from_s("Publisher: Marvel")]),
                Transfer("Expenses:Cards", Commodity.parse("$ 9.00"),
                         tags=[Tag.from_s("Collection: Baseball")]),
                Transfer("Cash"),
            ])
        self.assertEqual(posting.to_ledger(), "\n".join([
            "2021-10-02 Heroes R Us",
            "  ; Vacation: Seattle",
            "  Expenses:Comics    $ 5.00",
            "  ; Publisher: Marvel",
            "  Expenses:Cards     $ 9.00",
            "  ; Collection: Baseball",
            "  Cash"]))

    def test_to_ledger_dates_and_tags(self):
        posting = Posting(date(2021, 10, 2), "Heroes R Us",
                          effective_date=date(2021, 10, 4))
        posting.append_tag("Vacation: Seattle")
        posting.append_tag(Tag("Reimbursable"))
        x = posting.append_transfer("Expenses:Comics", "$5")
        x.effective_date = date(2021, 10, 3)
        posting.append_transfer("Cash")
        self.assertEqual(posting.to_ledger(), "\n".join([
            "2021-10-02=2021-10-04 Heroes R Us",
            "  ; Vacation: Seattle, Reimbursable",
            "  Expenses:Comics    $ 5.00  ; [=2021-10-03]",
            "  Cash"]))

    def test_append_transfer(self):
        posting = Posting(date(2012, 4, 10), "My Broker")
        x = posting.append_transfer("Assets:Brokerage", "10 AAPL {$50.00}")
        self.assertIsNone(x.commodity)
        self.assertIsInstance(x.complex_commodity, ComplexCommodity)
        self.assertIs(x.amount, x.complex_commodity)
        x = posting.append_transfer("Assets:Brokerage:Cash", "$-500.00")
        self.assertEqual(str(x.commodity), "$ -500.00")
        self.assertIsNone(x.complex_commodity)
        x = posting.append_transfer("Equity",
                                    Commodity.parse("$ 0.00"))
        self.assertEqual(str(x.amount), "$ 0.00")
        x = posting.append_transfer("Assets:Cash")
        self.assertIsNone(x.amount)
        self.assertEqual(len(posting.transfers), 4)
        with self.assertRaises(ParseError):
            posting.append_transfer("Assets:Cash", "ten dollars")

    def test_append_tag(self):
        posting = Posting(date(2021, 1, 20), "Fancy Restaurant")
        posting.append_tag("SmallBusiness")
        posting.append_transfer("Personal:Expenses:Dining", "$ 50.00")
        posting.append_tag("wine: red")
        self.assertEqual([str(i) for i in posting.tags], ["SmallBusiness"])
        self.assertEqual([str(i) for i in posting.transfers[0].tags],
                         ["wine: red"])

    def test_valid(self):
        posting = Posting(date(2021, 1, 20), "Lawn Mowing")
        self.assertFalse(posting.is_valid())
        posting.append_transfer("Cash")
        self.assertFalse(posting.is_valid())
        posting.append_transfer("Expenses", "$ 100.00")
        self.assertTrue(posting.is_valid())
        posting.append_transfer("Checking")
        self.assertFalse(posting.is_valid())
        with self.assertRaises(PostingError):
            posting.validate()
        with self.assertRaises(PostingError):
            posting.to_ledger()

        posting = Posting(None, "Lawn Mowing",
                          transfers=[Transfer("Expenses",
                                              Commodity.parse("$ 1"))])
        self.assertFalse(posting.is_valid())
        posting = Posting(date(2021, 1, 20), "",
                          transfers=[Transfer("Expenses",
                                              Commodity.parse("$ 1"))])
        self.assertFalse(posting.is_valid())

    def test_parse(self):
        text = "\n".join([
            "2021-10-02 Heroes R Us",
            "  Expenses:Comics    $ 5.00",
            "  ; Publisher: Marvel",
            "  Cash"])
        posting = Posting.parse(text)
        self.assertEqual(posting.description, "Heroes R Us")
        self.assertEqual(posting.to_ledger(), text)
        with self.assertRaises(ParseError):
            Posting.parse("; nothing here")
        with self.assertRaises(ParseError):
            Posting.parse(text + "\n\n" + text)

    def test_transfer(self):
        with self.assertRaises(ValueError):
            Transfer("Cash", Commodity.parse("$ 1"),
                     ComplexCommodity.parse("1 AAPL @ $1"))

if __name__ == "__main__":
    unittest.main()
