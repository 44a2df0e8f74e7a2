from decimal import Decimal, Context, InvalidOperation, \
    ROUND_HALF_UP, ROUND_DOWN
import re

from ptajournal.currency import Currency
from ptajournal.parser import ParseError
from ptajournal.printing import moneyfmt, decimal2str, code2str

_CONTEXT = Context(prec=200, rounding=ROUND_HALF_UP)

# Scalar multiplication and division results keep this many places.
SCALAR_PLACES = 17

MATCH_AMOUNT = r'(-?[ ]*?[\d,]+(?:\.[\d]+|))'
MATCH_CODE = r'(?:(?<!\\)"(.+)(?<!\\)"|([^ \-\d]+))'

_MATCH_COMMODITY = (r'\A(?:' + MATCH_CODE + r'[ ]*?' + MATCH_AMOUNT +
                    r'|' + MATCH_AMOUNT + r'[ ]*?' + MATCH_CODE + r')')

COMMODITY = re.compile(_MATCH_COMMODITY + r'\Z')
COMMODITY_WITH_REMAINDER = re.compile(_MATCH_COMMODITY + r'(.*?)\Z')

class IncompatibleCommodity(Exception):
    pass

def _to_decimal(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if isinstance(x, bool):
        raise TypeError(f"Unsupported type {type(x)}.")
    if isinstance(x, int):
        return Decimal(x)
    if isinstance(x, float):
        return Decimal(repr(x))
    raise TypeError(f"Unsupported type {type(x)}.")

def _fractional_digits(x: Decimal) -> int:
    return max(0, -x.normalize(_CONTEXT).as_tuple().exponent)

def _minor_unit(code: str | None) -> int | None:
    currency = Currency.from_code_or_symbol(code)
    if currency is None:
        return None
    return currency.minor_unit

def _match_parts(m: re.Match) -> tuple[str, str]:
    if m.group(1) or m.group(2):
        code, amount = (m.group(1) or m.group(2)), m.group(3)
    else:
        code, amount = (m.group(5) or m.group(6)), m.group(4)
    return (code, amount)

class Commodity():
    """A quantity of a currency, security or any other unit of value.

    quantity is exact. precision is the number of decimal places shown
    by to_s(), and never affects equality.
    """
    def __init__(self, code: str | None, alphabetic_code: str | None,
                 quantity: Decimal, precision: int):
        quantity = Decimal(quantity)
        if quantity.is_zero():
            quantity = quantity.copy_abs()
        self._code = code
        self._alphabetic_code = alphabetic_code
        self._quantity = quantity
        self._precision = precision

    @property
    def code(self):
        return self._code
    @property
    def alphabetic_code(self):
        return self._alphabetic_code
    @property
    def quantity(self):
        return self._quantity
    @property
    def precision(self):
        return self._precision

    @classmethod
    def from_symbol_and_amount(cls, symbol: str | None,
                               amount: str | Decimal | int | float = 0) \
        -> "Commodity":
        if not isinstance(amount, str):
            amount = decimal2str(_to_decimal(amount))
        amount = amount.replace(",", "").replace(" ", "")
        try:
            quantity = Decimal(amount)
        except InvalidOperation as e:
            raise ParseError(f"Invalid amount '{amount}'") from e
        if not quantity.is_finite():
            raise ParseError(f"Invalid amount '{amount}'")
        _, _, fraction = amount.partition(".")
        precision = len(fraction)
        currency = Currency.from_code_or_symbol(symbol)
        if currency:
            alphabetic_code = currency.alphabetic_code
            if currency.minor_unit and currency.minor_unit > precision:
                precision = currency.minor_unit
        else:
            alphabetic_code = symbol
        return cls(symbol, alphabetic_code, quantity, precision)

    @classmethod
    def parse(cls, text: str) -> "Commodity":
        """Parse "$ 1,234.5", "-10 AAPL", '100 "crab apples"' and friends."""
        text = text.strip()
        m = COMMODITY.match(text)
        if not m:
            if text == "0":
                return cls.from_symbol_and_amount(None, text)
            raise ParseError(f"Unable to parse commodity '{text}'")
        return cls.from_symbol_and_amount(*_match_parts(m))

    @classmethod
    def parse_with_remainder(cls, text: str) -> tuple["Commodity", str]:
        m = COMMODITY_WITH_REMAINDER.match(text)
        if not m:
            raise ParseError(f"Unable to parse commodity in '{text}'")
        return (cls.from_symbol_and_amount(*_match_parts(m)), m.group(7))

    def to_s(self, precision: int | None = None, commatize: bool = False,
             no_code: bool = False) -> str:
        x = self if precision is None else self.round(precision)
        number = moneyfmt(x.quantity, places=x.precision,
                          sep="," if commatize else "")
        if no_code or not self.code:
            return number
        code = code2str(self.code)
        if len(self.code) == 1:
            return f"{code} {number}"
        return f"{number} {code}"

    def __str__(self):
        return self.to_s()

    def __repr__(self):
        return (f"Commodity({self.code!r}, {self.alphabetic_code!r}, "
                f"{self.quantity}, {self.precision})")

    def _check_compatible(self, other: "Commodity", operation: str):
        if not isinstance(other, Commodity):
            raise TypeError(f"Unsupported type {type(other)} for {operation}.")
        if (self.alphabetic_code and other.alphabetic_code and
                self.alphabetic_code != other.alphabetic_code):
            raise IncompatibleCommodity(
                f"Unable to {operation} {self} and {other}.")

    def _with_sum(self, other: "Commodity", quantity: Decimal) -> "Commodity":
        if self.alphabetic_code:
            code, alphabetic_code = self.code, self.alphabetic_code
        else:
            code, alphabetic_code = other.code, other.alphabetic_code
        precision = max(self.precision, other.precision)
        minor_unit = _minor_unit(alphabetic_code)
        if quantity.is_zero():
            if minor_unit is not None:
                precision = minor_unit
        elif minor_unit is not None and precision > minor_unit:
            # Drop the trailing zeros that only long operands brought along.
            precision = max(minor_unit,
                            min(precision, _fractional_digits(quantity)))
        return Commodity(code, alphabetic_code, quantity, precision)

    def __add__(self, other):
        if isinstance(other, int) and other == 0:
            return self
        self._check_compatible(other, "add")
        return self._with_sum(
            other, _CONTEXT.add(self.quantity, other.quantity))

    def __radd__(self, other):
        # sum() starts from 0.
        if isinstance(other, int) and other == 0:
            return self
        return NotImplemented

    def __sub__(self, other):
        self._check_compatible(other, "subtract")
        return self._with_sum(
            other, _CONTEXT.subtract(self.quantity, other.quantity))

    def _scaled(self, quantity: Decimal) -> "Commodity":
        quantity = quantity.quantize(Decimal(10) ** -SCALAR_PLACES,
                                     context=_CONTEXT)
        return Commodity.from_symbol_and_amount(self.code,
                                                decimal2str(quantity))

    def __mul__(self, other):
        if isinstance(other, Commodity):
            raise TypeError("Multiplying two commodities is not supported.")
        try:
            factor = _to_decimal(other)
        except TypeError:
            return NotImplemented
        return self._scaled(_CONTEXT.multiply(self.quantity, factor))

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Commodity):
            raise TypeError("Dividing two commodities is not supported.")
        try:
            divisor = _to_decimal(other)
        except TypeError:
            return NotImplemented
        if divisor.is_zero():
            raise ZeroDivisionError(f"Division of {self} by zero.")
        return self._scaled(_CONTEXT.divide(self.quantity, divisor))

    def __neg__(self):
        return Commodity(self.code, self.alphabetic_code,
                         -self.quantity, self.precision)

    def __abs__(self):
        return Commodity(self.code, self.alphabetic_code,
                         abs(self.quantity), self.precision)

    def _rounded(self, places: int, rounding: str) -> "Commodity":
        if places < 0:
            raise ValueError(f"Invalid number of places: {places}.")
        q = Decimal(10) ** -places
        x = self.quantity.quantize(q, rounding=rounding, context=_CONTEXT)
        return Commodity(self.code, self.alphabetic_code, x, places)

    def round(self, places: int) -> "Commodity":
        """Round half away from zero."""
        return self._rounded(places, ROUND_HALF_UP)

    def floor(self, places: int) -> "Commodity":
        """Truncate toward zero."""
        return self._rounded(places, ROUND_DOWN)

    def is_zero(self) -> bool:
        return self.quantity.is_zero()

    def __hash__(self):
        # A code-less commodity equals coded ones of the same quantity.
        return hash(self._quantity)

    def __eq__(self, other):
        if not isinstance(other, Commodity):
            return NotImplemented
        if (self.alphabetic_code and other.alphabetic_code and
                self.alphabetic_code != other.alphabetic_code):
            return False
        return self.quantity == other.quantity

    def __lt__(self, other):
        self._check_compatible(other, "compare")
        return self.quantity < other.quantity

    def __le__(self, other):
        self._check_compatible(other, "compare")
        return self.quantity <= other.quantity

    def __gt__(self, other):
        self._check_compatible(other, "compare")
        return self.quantity > other.quantity

    def __ge__(self, other):
        self._check_compatible(other, "compare")
        return self.quantity >= other.quantity

def sum_commodities(commodities) -> Commodity:
    """Add up commodities. An empty sequence yields a code-less zero."""
    total = Commodity.from_symbol_and_amount(None, "0")
    for i in commodities:
        total = total + i
    return total
