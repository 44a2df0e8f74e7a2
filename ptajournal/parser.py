from typing import Union
from typing import NamedTuple
from datetime import date, time
import re

class ParseError(Exception):
    def __init__(self, message: str,
                 position: Union["Position", None] = None,
                 context: str = ""):
        self.position = position
        self.context = context
        if not position:
            super().__init__(message)
        elif context:
            super().__init__(
                f"{message}\n"
                f"line: {position.line}, column: {position.column}\n"
                f"{context}\n" + (position.column * " ") + "^"
            )
        else:
            super().__init__(
                f"{message}\n"
                f"line: {position.line}, column: {position.column}\n"
            )

class Position(NamedTuple):
    line: int
    column: int

class Span(NamedTuple):
    start: Position
    end: Position

class Entity():
    def __init__(self, span: Span | None = None):
        self.span: Span | None = span

def parse_date(line: str, begin: int = 0) -> tuple[date | None, int]:
    """Parse YYYY/MM/DD or YYYY-MM-DD.

    A well formed but impossible date (2021-02-30) raises ValueError.
    """
    if len(line) <= begin:
        return (None, len(line))
    line = line[begin:]
    m = re.match(r"(\d{4})/(\d{1,2})/(\d{1,2})", line)
    if not m:
        m = re.match(r"(\d{4})-(\d{1,2})-(\d{1,2})", line)
    if not m:
        return (None, begin)
    x = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    return (x, begin + m.end())

def parse_time(line: str, begin: int = 0) -> tuple[time | None, int]:
    if len(line) <= begin:
        return (None, len(line))
    line = line[begin:]
    m = re.match(r"(\d{1,2}):(\d{1,2}):(\d{1,2})", line)
    if not m:
        return (None, begin)
    x = time(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    return (x, begin + m.end())

def parse_bracketed_date(line: str, begin: int = 0, prefix: str = "") \
    -> tuple[date | None, int]:
    """Parse a date wrapped in square brackets, e.g. [2012-04-10] or
    [=2012-04-10] when prefix is "="."""
    if len(line) <= begin:
        return (None, len(line))
    opening = "[" + prefix
    if not line.startswith(opening, begin):
        return (None, begin)
    consumed = begin + len(opening)
    space, consumed = parse_space(line, consumed)
    x, consumed = parse_date(line, consumed)
    if (x is None) or (len(line) <= consumed):
        return (None, begin)
    space, consumed = parse_space(line, consumed)
    if consumed >= len(line) or line[consumed] != "]":
        return (None, begin)
    consumed += 1
    return (x, consumed)

def parse_hard_space(line: str, begin: int = 0) \
    -> tuple[str | None, int]:
    if len(line) <= begin:
        return (None, len(line))
    line = line[begin:]
    m = re.match(r'[\s]{2,}|\t', line)
    if m:
        return (m.group(0), begin + m.end())
    return (None, begin)

def parse_space(line: str, begin: int = 0) \
    -> tuple[str | None, int]:
    if len(line) <= begin:
        return (None, len(line))
    line = line[begin:]
    m = re.match(r'[\s]+', line)
    if m:
        return (m.group(0), begin + m.end())
    return (None, begin)

def parse_account_name(line: str, begin: int = 0) \
    -> tuple[str | None, int]:
    if len(line) <= begin:
        return (None, len(line))
    line = line[begin:]
    # Accounts may contain single spaces ("Income:Capital Gains").
    m = re.match(r'[^\s]([^\s]| [^\s])*', line)
    if m:
        return (m.group(0), begin + m.end())
    return (None, begin)

def parse_code(line: str, begin: int = 0) \
    -> tuple[str | None, int]:
    if len(line) <= begin:
        return (None, len(line))
    line = line[begin:]
    m = re.match(r'[^\s]+', line)
    if m:
        return (m.group(0), begin + m.end())
    return (None, begin)

def parse_keyword(keyword: str, line: str, begin: int = 0) \
    -> tuple[str | None, int]:
    if len(line) <= begin:
        return (None, len(line))
    line = line[begin:]
    m = re.match(keyword, line)
    if m:
        return (m.group(0), begin + m.end())
    return (None, begin)

def parse_comment(line: str, begin: int = 0) \
    -> tuple[str | None, int]:
    """Everything from the first semicolon on, without the semicolon."""
    if len(line) <= begin:
        return (None, len(line))
    if line[begin] == ";":
        return (line[begin + 1:].lstrip(" \t"), len(line))
    else:
        return (None, begin)
