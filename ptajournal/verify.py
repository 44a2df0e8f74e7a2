#! /usr/bin/env python3

import argparse
import logging
import sys

import ptajournal.ledger as ledger
from ptajournal.journal import Journal
from ptajournal.parser import ParseError
from ptajournal.posting import Posting, Tag
from ptajournal.util import read_journal, read_prices

logger = logging.getLogger(__name__)

def _duplicate_keys(tags: list[Tag]) -> list[str]:
    seen = set()
    duplicates = []
    for i in tags:
        if i.key in seen and i.key not in duplicates:
            duplicates.append(i.key)
        seen.add(i.key)
    return duplicates

def check_duplicate_tags(posting: Posting, lines: list[str] | None = None):
    """A tag key may appear once per transfer, counting the posting's own
    tags."""
    duplicates = _duplicate_keys(posting.tags)
    for i in posting.transfers:
        for key in _duplicate_keys(posting.tags + i.tags):
            if key not in duplicates:
                duplicates.append(key)
    if duplicates:
        raise ledger.LedgerError(
            f"Duplicate tags: {', '.join(duplicates)}.", posting, lines)

def check_journal(journal: Journal, lines: list[str] | None = None,
                  balance: bool = True):
    for i in journal.postings:
        if balance:
            ledger.check_posting(i, lines)
        else:
            i.validate(lines)
        check_duplicate_tags(i, lines)

def parse_args(argv=None):
    argparser = argparse.ArgumentParser(
        description="Check a journal for malformed or unbalanced postings, "
                    "and optionally a prices database for malformed records.")
    argparser.add_argument("database", type=str,
                           help="journal file")
    argparser.add_argument("--prices", type=str,
                           help="prices database, checked for "
                                "malformed records")
    argparser.add_argument("--no-balance", action="store_true",
                           default=False,
                           help="Skip the balance check")
    argparser.add_argument("--log-file", type=str,
                           help="Log File")
    return argparser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)

    if args.log_file:
        logging.basicConfig(filename=args.log_file,
                            filemode="w",
                            format='[%(name)s:%(levelname)s] %(message)s',
                            level=logging.INFO)

    try:
        journal, lines = read_journal(args.database)
        logger.info(f"Read {len(journal.postings)} postings "
                    f"from {args.database}.")
        if args.prices:
            pricer = read_prices(args.prices)
            logger.info(f"Read {len(pricer)} prices from {args.prices}.")
        check_journal(journal, lines, balance=not args.no_balance)
    except (ParseError, ledger.LedgerError) as e:
        logger.error(str(e))
        print(e, file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
