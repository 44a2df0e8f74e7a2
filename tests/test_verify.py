import contextlib
import io
import os
import tempfile
import unittest
from datetime import date

from ptajournal.journal import Journal
from ptajournal.ledger import LedgerError, BalanceError, PostingError
from ptajournal.posting import Posting
import ptajournal.verify as verify

BALANCED = """\
2012-04-10 My Broker
  Assets:Brokerage            10 AAPL {$50.00}
  Assets:Brokerage:Cash      $-500.00

2021-10-02 Heroes R Us
  ; Vacation: Seattle
  Expenses:Comics    $ 5.00
  ; Publisher: Marvel
  Cash
"""

UNBALANCED = """\
2021-10-02 Heroes R Us
  Expenses:Comics    $ 5.00
  Cash               $ -4.00
"""

class TestVerify(unittest.TestCase):

    def test_duplicate_tags(self):
        journal = Journal.parse(BALANCED)
        for i in journal.postings:
            verify.check_duplicate_tags(i)

        journal = Journal.parse("\n".join([
            "2021-10-02 Heroes R Us",
            "  ; Vacation: Seattle",
            "  Expenses:Comics    $ 5.00",
            "  ; Vacation: Portland",
            "  Cash"]))
        with self.assertRaises(LedgerError) as cm:
            verify.check_duplicate_tags(journal.postings[0])
        self.assertTrue(str(cm.exception).startswith(
            "Duplicate tags: Vacation."))

        journal = Journal.parse("\n".join([
            "2021-10-02 Heroes R Us",
            "  Expenses:Comics    $ 5.00",
            "  ; a: 1, a: 2",
            "  Cash"]))
        with self.assertRaises(LedgerError):
            verify.check_duplicate_tags(journal.postings[0])

        # The same key on two transfers is fine.
        journal = Journal.parse("\n".join([
            "2021-10-02 Heroes R Us",
            "  Expenses:Comics    $ 5.00",
            "  ; a: 1",
            "  Cash",
            "  ; a: 2"]))
        verify.check_duplicate_tags(journal.postings[0])

    def test_check_journal(self):
        verify.check_journal(Journal.parse(BALANCED))
        journal = Journal.parse(UNBALANCED)
        with self.assertRaises(BalanceError):
            verify.check_journal(journal)
        verify.check_journal(journal, balance=False)

    def test_check_journal_invalid_posting(self):
        posting = Posting(date(2021, 10, 2), "Heroes R Us")
        posting.append_transfer("Expenses:Comics", "$ 5.00")
        posting.append_transfer("Cash")
        posting.append_transfer("Checking")
        for balance in (True, False):
            with self.assertRaises(PostingError):
                verify.check_journal(Journal([posting]), balance=balance)

    def test_main_malformed_prices(self):
        with tempfile.TemporaryDirectory() as d:
            journal = os.path.join(d, "good.journal")
            prices = os.path.join(d, "prices.db")
            with open(journal, "w", encoding="utf-8") as f:
                f.write(BALANCED)
            with open(prices, "w", encoding="utf-8") as f:
                f.write("P 2020-01-01 ABC $ 1.50\nP 2020-02-30 ABC $ 1.75\n")

            stderr = io.StringIO()
            with contextlib.redirect_stderr(stderr):
                self.assertEqual(verify.main([journal, "--prices", prices]),
                                 1)
            self.assertIn("Invalid price time", stderr.getvalue())
            self.assertIn("line: 2", stderr.getvalue())

    def test_main(self):
        with tempfile.TemporaryDirectory() as d:
            good = os.path.join(d, "good.journal")
            bad = os.path.join(d, "bad.journal")
            prices = os.path.join(d, "prices.db")
            for path, contents in ((good, BALANCED), (bad, UNBALANCED),
                                   (prices, "P 2020-01-01 ABC $ 1.50\n")):
                with open(path, "w", encoding="utf-8") as f:
                    f.write(contents)

            self.assertEqual(verify.main([good]), 0)
            self.assertEqual(verify.main([good, "--prices", prices]), 0)
            self.assertEqual(verify.main([bad, "--no-balance"]), 0)

            stderr = io.StringIO()
            with contextlib.redirect_stderr(stderr):
                self.assertEqual(verify.main([bad]), 1)
            self.assertIn("Posting unbalanced by $ 1.00.", stderr.getvalue())
            self.assertIn("line: 1, column: 0", stderr.getvalue())

            stderr = io.StringIO()
            with contextlib.redirect_stderr(stderr):
                self.assertEqual(verify.main([good, "--prices", good]), 1)
            self.assertIn("Unexpected line in prices database",
                          stderr.getvalue())

if __name__ == "__main__":
    unittest.main()
