from enum import Enum
from typing import Iterable
import logging
import re

from ptajournal.parser import ParseError, Position, Span, \
    parse_date, parse_space, parse_hard_space, parse_account_name, \
    parse_comment, parse_bracketed_date
from ptajournal.posting import Posting, Tag

logger = logging.getLogger(__name__)

_TOO_MANY_SEMICOLONS = re.compile(r'\A.*[^\\];.*[^\\];.*\Z')
_TAG_TOKEN = re.compile(r'(?:[^ ]+: *[^,]*|:[^ \t]+:)')
_TAG_DECLARATION = re.compile(r'\A:?(.+):\Z')

class Journal():
    def __init__(self, postings: Iterable[Posting] | None = None):
        self.postings: list[Posting] = list(postings) if postings else []

    @classmethod
    def parse(cls, contents: str) -> "Journal":
        p = Parser()
        p.parse_lines(contents.splitlines())
        return p.finish()

    def to_s(self) -> str:
        return "\n\n".join(i.to_ledger() for i in self.postings)

    def __str__(self):
        return self.to_s()

class State(Enum):
    AWAITING_HEADER = 1
    IN_POSTING = 2

def split_comment(line: str) -> tuple[str, str | None]:
    i = line.find(";")
    if i < 0:
        return (line, None)
    comment, _ = parse_comment(line, i)
    return (line[:i].rstrip(), comment)

class Parser():
    """Line at a time journal parser.

    Postings are separated by blank lines. Lines starting with a
    semicolon between postings are ignored.
    """
    def __init__(self):
        self.journal = Journal()
        self.lines: list[str] = []
        self._current_line_number = 0
        self._state = State.AWAITING_HEADER
        self._posting: Posting | None = None

    def _error(self, message: str, line: str, column: int = 0) -> ParseError:
        return ParseError(
            message, Position(self._current_line_number, column), line)

    def _start_posting(self, content: str, line: str) -> None:
        try:
            date, consumed = parse_date(content)
            effective_date = None
            if date and content[consumed:consumed + 1] == "=":
                effective_date, consumed = parse_date(content, consumed + 1)
                if not effective_date:
                    raise self._error("Invalid effective date", line, consumed)
        except ValueError as e:
            raise self._error(f"Invalid date: {e}", line) from e
        if not date:
            raise self._error("Unexpected line", line)
        space, consumed = parse_space(content, consumed)
        description = content[consumed:].strip()
        if not (space and description):
            raise self._error("Posting header not well formed", line, consumed)
        self._posting = Posting(date, description,
                                effective_date=effective_date)
        self._posting.span = Span(
            Position(self._current_line_number, 0),
            Position(self._current_line_number, len(line)))
        self._state = State.IN_POSTING

    def _append_transfer(self, content: str, line: str) -> None:
        _, consumed = parse_space(content)
        column = consumed
        account, consumed = parse_account_name(content, consumed)
        if not account:
            raise self._error("Transfer (account) not well formed",
                              line, consumed)
        if consumed == len(content):
            transfer = self._posting.append_transfer(account)
        else:
            space, consumed = parse_hard_space(content, consumed)
            if not space:
                raise self._error("Transfer not well formed", line, consumed)
            amount = content[consumed:]
            try:
                transfer = self._posting.append_transfer(account, amount)
            except ParseError as e:
                raise self._error(
                    f"Unable to parse the amount of transfer: {e}",
                    line, consumed) from e
        transfer.span = Span(
            Position(self._current_line_number, column),
            Position(self._current_line_number, len(line)))

    def _apply_comment(self, comment: str, line: str) -> None:
        i = comment.find("[=")
        if i >= 0 and self._posting.transfers:
            try:
                x, _ = parse_bracketed_date(comment, i, prefix="=")
            except ValueError as e:
                raise self._error(f"Invalid date: {e}", line) from e
            if x:
                self._posting.transfers[-1].effective_date = x
        for token in _TAG_TOKEN.findall(comment):
            token = token.strip()
            m = _TAG_DECLARATION.match(token)
            if m:
                for key in m.group(1).split(":"):
                    if key:
                        self._posting.append_tag(Tag(key))
            else:
                self._posting.append_tag(Tag.from_s(token))

    def _finish_posting(self, last_line: int) -> None:
        end = Position(last_line, 0)
        self._posting.span = Span(self._posting.span.start, end)
        self._posting.validate(self.lines)
        self.journal.postings.append(self._posting)
        logger.debug(f"Parsed posting: {self._posting.date} "
                     f"{self._posting.description}")
        self._posting = None
        self._state = State.AWAITING_HEADER

    def parse_line(self, line: str) -> None:
        self._current_line_number += 1
        line = line.rstrip()
        self.lines.append(line)

        if _TOO_MANY_SEMICOLONS.match(line):
            raise self._error("Too many semicolons", line)
        content, comment = split_comment(line)

        if self._state == State.AWAITING_HEADER:
            if not content.strip():
                # Blank lines and journal level comments.
                return None
            if content[0] in " \t":
                raise self._error("Unexpected transfer", line)
            self._start_posting(content, line)
        elif not content.strip():
            if comment is None:
                self._finish_posting(self._current_line_number - 1)
                return None
        elif content[0] in " \t":
            self._append_transfer(content, line)
        else:
            raise self._error("Missing a blank line before posting", line)

        if comment:
            self._apply_comment(comment, line)

    def parse_lines(self, lines: Iterable[str]) -> None:
        for i in lines:
            self.parse_line(i)

    def finish(self) -> Journal:
        """Close a posting left open at the end of input."""
        if self._state == State.IN_POSTING:
            self._finish_posting(self._current_line_number)
        return self.journal
