from datetime import date
from enum import Enum
import re

from ptajournal.commodity import Commodity
from ptajournal.parser import ParseError, parse_bracketed_date
from ptajournal.printing import date2str

class Operation(Enum):
    PER_UNIT = "per_unit"
    PER_LOT = "per_lot"

    @classmethod
    def from_token(cls, token: str) -> "Operation":
        """One sigil ("@", "{") is per unit, two ("@@", "{{") per lot."""
        return cls.PER_UNIT if len(token) == 1 else cls.PER_LOT

_LOT = re.compile(r'\A(\{+) *(=?) *([^}]+)\}+(.*)\Z')
_LAMBDA = re.compile(r'\A\(\((.+)\)\)(.*)\Z')
_OPERATION = re.compile(r'\A(@{1,2})(.*)\Z')
_WHITESPACE = re.compile(r'\A[ \t]+(.*)\Z')
_EQUAL = re.compile(r'\A=(.*)\Z')
_EXPRESSION = re.compile(r'\A\(([^)]+)\)(.*)\Z')
_LOT_EXPRESSION = re.compile(r'\A\((.+)\)\Z')

class ComplexCommodity():
    """A commodity with lot, date, expression or conversion annotations.

    Covers ledger amounts such as:
        -5 AAPL {$50.00} [2012-04-10] (Oh my!) @@ $375.00
        10 AAPL @ =$50.00
        (5 AAPL * 2) @ ($500.00 / 10)
    """
    FIELDS = ("left", "left_is_equal", "left_lot", "left_lot_expression",
              "left_lot_operation", "left_lot_is_equal", "left_date",
              "left_expression", "left_lambda", "operation", "right",
              "right_is_equal", "right_expression")

    def __init__(self,
                 left: Commodity | None = None,
                 left_is_equal: bool = False,
                 left_lot: Commodity | None = None,
                 left_lot_expression: str | None = None,
                 left_lot_operation: Operation | None = None,
                 left_lot_is_equal: bool = False,
                 left_date: date | None = None,
                 left_expression: str | None = None,
                 left_lambda: str | None = None,
                 operation: Operation | None = None,
                 right: Commodity | None = None,
                 right_is_equal: bool = False,
                 right_expression: str | None = None):
        self.left = left
        self.left_is_equal = left_is_equal
        self.left_lot = left_lot
        self.left_lot_expression = left_lot_expression
        self.left_lot_operation = left_lot_operation
        self.left_lot_is_equal = left_lot_is_equal
        self.left_date = left_date
        self.left_expression = left_expression
        self.left_lambda = left_lambda
        self.operation = operation
        self.right = right
        self.right_is_equal = right_is_equal
        self.right_expression = right_expression

    @classmethod
    def parse(cls, text: str) -> "ComplexCommodity":
        fields = {}

        def assign(name, value):
            if name in fields:
                raise ParseError(
                    f"Too many {name.replace('_', ' ')} in '{text}'")
            fields[name] = value

        rest = text.strip()
        while rest:
            m = _WHITESPACE.match(rest)
            if m:
                rest = m.group(1)
                continue
            m = _EQUAL.match(rest)
            if m:
                if "operation" in fields:
                    assign("right_is_equal", True)
                else:
                    assign("left_is_equal", True)
                rest = m.group(1)
                continue
            m = _LOT.match(rest)
            if m:
                assign("left_lot_operation", Operation.from_token(m.group(1)))
                assign("left_lot_is_equal", m.group(2) == "=")
                body = m.group(3).strip()
                expression = _LOT_EXPRESSION.match(body)
                if expression:
                    assign("left_lot_expression", expression.group(1))
                else:
                    assign("left_lot", Commodity.parse(body))
                rest = m.group(4)
                continue
            m = _LAMBDA.match(rest)
            if m:
                assign("left_lambda", m.group(1))
                rest = m.group(2)
                continue
            try:
                lot_date, consumed = parse_bracketed_date(rest)
            except ValueError as e:
                raise ParseError(f"Invalid lot date in '{text}'") from e
            if lot_date:
                assign("left_date", lot_date)
                rest = rest[consumed:]
                continue
            m = _OPERATION.match(rest)
            if m:
                assign("operation", Operation.from_token(m.group(1)))
                rest = m.group(2)
                continue
            m = _EXPRESSION.match(rest)
            if m:
                if "operation" in fields:
                    assign("right_expression", m.group(1))
                else:
                    assign("left_expression", m.group(1))
                rest = m.group(2)
                continue
            try:
                commodity, rest = Commodity.parse_with_remainder(rest)
            except ParseError as e:
                raise ParseError(
                    f"Unable to parse '{rest}' in '{text}'") from e
            if "operation" in fields:
                assign("right", commodity)
            else:
                assign("left", commodity)

        if "left" not in fields and "left_expression" not in fields:
            raise ParseError(f"Missing a quantity in '{text}'")
        if "operation" in fields and \
                "right" not in fields and "right_expression" not in fields:
            raise ParseError(f"Missing a price after the '@' in '{text}'")
        return cls(**fields)

    def cost(self) -> Commodity | None:
        """The left quantity valued in its lot price, or else in its
        conversion price. None when neither is a plain commodity."""
        if self.left is None or self.left_lot_expression is not None:
            return None
        if self.left_lot is not None:
            price, operation = self.left_lot, self.left_lot_operation
        elif self.right is not None:
            price, operation = self.right, self.operation
        else:
            return None
        if operation == Operation.PER_UNIT:
            return price * self.left.quantity
        if self.left.quantity < 0:
            return -abs(price)
        return abs(price)

    def to_s(self) -> str:
        parts = []
        if self.left_is_equal:
            parts.append("=")
        if self.left is not None:
            parts.append(str(self.left))
        if self.left_lot is not None or self.left_lot_expression is not None:
            lot = "=" if self.left_lot_is_equal else ""
            if self.left_lot_expression is not None:
                lot += f"({self.left_lot_expression})"
            else:
                lot += str(self.left_lot)
            if self.left_lot_operation == Operation.PER_LOT:
                parts.append("{{" + lot + "}}")
            else:
                parts.append("{" + lot + "}")
        if self.left_date is not None:
            parts.append(f"[{date2str(self.left_date)}]")
        if self.left_expression is not None:
            parts.append(f"({self.left_expression})")
        if self.left_lambda is not None:
            parts.append(f"(({self.left_lambda}))")
        if self.operation == Operation.PER_UNIT:
            parts.append("@")
        elif self.operation == Operation.PER_LOT:
            parts.append("@@")
        if self.right_is_equal:
            parts.append("=")
        if self.right is not None:
            parts.append(str(self.right))
        if self.right_expression is not None:
            parts.append(f"({self.right_expression})")
        return " ".join(parts)

    def __str__(self):
        return self.to_s()

    def __repr__(self):
        return f"ComplexCommodity({self.to_s()!r})"

    def __eq__(self, other):
        if not isinstance(other, ComplexCommodity):
            return NotImplemented
        return all(getattr(self, i) == getattr(other, i) for i in self.FIELDS)

    def __hash__(self):
        return hash(tuple(getattr(self, i) for i in self.FIELDS))
