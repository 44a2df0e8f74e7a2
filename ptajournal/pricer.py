from datetime import date, datetime, time
from decimal import Decimal, Context, ROUND_HALF_UP
from typing import Callable, NamedTuple, Iterable
import bisect
import logging

from ptajournal.commodity import Commodity, SCALAR_PLACES
from ptajournal.currency import Currency
from ptajournal.parser import ParseError, Position, parse_keyword, \
    parse_space, parse_date, parse_time, parse_code
from ptajournal.printing import decimal2str, datetime2str

logger = logging.getLogger(__name__)

_CONTEXT = Context(prec=200, rounding=ROUND_HALF_UP)

class NoPriceError(Exception):
    pass

def to_key(code1: str, code2: str) -> str:
    """Both directions of a pair share one key."""
    return " ".join(sorted([code1, code2]))

class Price(NamedTuple):
    at: datetime
    lcode: str
    rcode: str
    amount: Commodity

    def to_key(self) -> str:
        return to_key(self.lcode, self.rcode)

    def to_s(self) -> str:
        return f"P {datetime2str(self.at)} {self.lcode} {self.amount}"

BeforePriceAdd_t = Callable[[datetime, str, Commodity], None]

def _alphabetic_code(code: str) -> str:
    currency = Currency.from_code_or_symbol(code)
    if currency:
        return currency.alphabetic_code
    return code

def _to_datetime(at: date | datetime) -> datetime:
    if isinstance(at, datetime):
        return at
    if isinstance(at, date):
        return datetime.combine(at, time())
    raise TypeError(f"Unsupported type {type(at)} for a price time.")

def _invert(quantity: Decimal) -> str:
    x = _CONTEXT.divide(Decimal(1), quantity)
    return decimal2str(x.quantize(Decimal(10) ** -SCALAR_PLACES,
                                  context=_CONTEXT))

def _search_date(prices: list[Price], at: datetime) -> Price | None:
    """Latest price at or before at. Among prices sharing a time, the one
    inserted last wins."""
    if not len(prices):
        return None

    low = 0
    high = len(prices) - 1

    while (high > low):
        mid = (low + high) // 2
        if prices[mid].at > at:
            high = mid
        elif mid == low:
            if prices[high].at <= at:
                low = high
            else:
                high -= 1
        else:
            low = mid

    found = prices[low]
    if at >= found.at:
        return found
    else:
        return None

def parse_price(line: str, line_number: int = 0) -> Price | None:
    """Parse a "P DATE [TIME] CODE AMOUNT" line. Blank and comment lines
    yield None."""
    i = line.find(";")
    if i >= 0:
        line = line[:i]
    line = line.rstrip()
    if not line.strip():
        return None

    def error(message, column):
        return ParseError(message, Position(line_number, column), line)

    P, consumed = parse_keyword("P", line)
    space, consumed = parse_space(line, consumed)
    if not (P and space):
        raise error("Unexpected line in prices database", 0)
    try:
        day, consumed = parse_date(line, consumed)
        space, consumed = parse_space(line, consumed)
        at_time, consumed = parse_time(line, consumed)
    except ValueError as e:
        raise error(f"Invalid price time: {e}", consumed) from e
    if not day:
        raise error("Price declaration not well formed", consumed)
    at = datetime.combine(day, at_time or time())
    space, consumed = parse_space(line, consumed)
    code, consumed = parse_code(line, consumed)
    space, consumed = parse_space(line, consumed)
    if not (code and space):
        raise error("Price declaration not well formed", consumed)
    try:
        amount = Commodity.parse(line[consumed:])
    except ParseError as e:
        raise error(f"Price declaration not well formed: {e}",
                    consumed) from e
    return Price(at, _alphabetic_code(code),
                 amount.alphabetic_code or amount.code, amount)

class Pricer():
    """Historical conversion rates between pairs of commodities.

    A rate recorded in one direction answers lookups in both. Not safe
    for concurrent use.
    """
    def __init__(self, prices: str | Iterable[str] | None = None,
                 before_price_add: BeforePriceAdd_t | None = None):
        self._prices: dict[str, list[Price]] = dict()
        self.before_price_add = before_price_add
        if prices:
            if isinstance(prices, str):
                prices = prices.splitlines()
            self._load(prices)

    def _load(self, lines: Iterable[str]) -> None:
        records = []
        for line_number, line in enumerate(lines, 1):
            p = parse_price(line, line_number)
            if p:
                records.append(p)
        # Ascending, stable for identical times.
        records.sort(key=lambda x: x.at)
        for p in records:
            self._prices.setdefault(p.to_key(), []).append(p)
        logger.info(f"Loaded {len(records)} prices.")

    @property
    def prices(self) -> dict[str, list[Price]]:
        return self._prices

    def __len__(self):
        return sum(len(i) for i in self._prices.values())

    def _resolve(self, p: Price, from_alpha: str, to_alpha: str,
                 code_to: str) -> Commodity:
        if p.lcode == from_alpha and p.amount.alphabetic_code == to_alpha:
            return p.amount
        return Commodity.from_symbol_and_amount(
            code_to, _invert(p.amount.quantity))

    def price(self, at: date | datetime, code_from: str, code_to: str) \
        -> Commodity:
        """One unit of code_from expressed in code_to at a point in time."""
        if not (code_from and code_to):
            raise NoPriceError(
                f"No price for {code_from} in {code_to}, a code is missing.")
        at = _to_datetime(at)
        from_alpha = _alphabetic_code(code_from)
        to_alpha = _alphabetic_code(code_to)
        prices = self._prices.get(to_key(from_alpha, to_alpha))
        found = _search_date(prices, at) if prices else None
        if found is None:
            raise NoPriceError(
                f"No price for {code_from} in {code_to} at {at}.")
        return self._resolve(found, from_alpha, to_alpha, code_to)

    def convert(self, at: date | datetime, commodity: Commodity,
                code_to: str) -> Commodity:
        rate = self.price(at, commodity.code, code_to)
        x = _CONTEXT.multiply(commodity.quantity, rate.quantity)
        return Commodity.from_symbol_and_amount(code_to, decimal2str(x))

    def add(self, at: date | datetime, code_from: str,
            to: Commodity) -> Price | None:
        """Record a rate. Returns None, without calling before_price_add,
        when the rate already in effect at that time is the same."""
        if not (code_from and (to.alphabetic_code or to.code)):
            raise ValueError(
                f"A price needs two codes, got {code_from} and {to}.")
        at = _to_datetime(at)
        from_alpha = _alphabetic_code(code_from)
        price = Price(at, from_alpha, to.alphabetic_code or to.code, to)
        key = price.to_key()
        prices = self._prices.get(key)
        i = None
        if prices:
            i = bisect.bisect_right(prices, at, key=lambda x: x.at)
            previous = prices[i - 1] if i else prices[-1]
            current = self._resolve(previous, from_alpha, price.rcode, to.code)
            if current == to:
                logger.debug(f"Skipping unchanged price {price.to_s()}")
                return None
        if self.before_price_add:
            self.before_price_add(at, code_from, to)
        if prices:
            prices.insert(i, price)
        else:
            self._prices[key] = [price]
        logger.debug(f"Added price {price.to_s()}")
        return price

    def to_s(self) -> str:
        records = [p for i in self._prices.values() for p in i]
        records.sort(key=lambda x: x.at)
        return "\n".join(p.to_s() for p in records)
