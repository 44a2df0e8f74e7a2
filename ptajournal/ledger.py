import logging

from ptajournal.parser import Entity
from ptajournal.commodity import Commodity
from ptajournal.complex_commodity import ComplexCommodity

logger = logging.getLogger(__name__)

class LedgerError(Exception):
    def __init__(self, message: str,
                 entity: Entity | None = None,
                 lines: list[str] | None = None):
        position = None
        context = None
        if entity is not None and entity.span is not None:
            position = entity.span.start
        if lines and position:
            try:
                context = lines[position.line - 1]
            except IndexError:
                context = None
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

class PostingError(LedgerError):
    pass

class BalanceError(LedgerError):
    pass

class Balance(dict):
    """Commodity totals keyed by alphabetic code. Zero totals are dropped,
    so a balanced set of transfers leaves the Balance empty."""
    def __iadd__(self, commodity: Commodity):
        if not isinstance(commodity, Commodity):
            raise TypeError(
                f"Unsupported type {type(commodity)} for addition.")
        key = commodity.alphabetic_code
        if key in self:
            self[key] = self[key] + commodity
        else:
            self[key] = commodity
        if self[key].is_zero():
            self.pop(key)
        return self
    def __str__(self):
        return ", ".join(str(self[i]) for i in sorted(self, key=str))

def transfer_value(amount: Commodity | ComplexCommodity | None) \
    -> Commodity | None:
    if amount is None or isinstance(amount, Commodity):
        return amount
    return amount.cost()

def posting_balance(posting) -> Balance | None:
    """Sum of the posting's transfers, or None when a transfer is elided
    or has no plain valuation (expressions, lambdas)."""
    balance = Balance()
    for i in posting.transfers:
        if i.amount is None:
            return None
        value = transfer_value(i.amount)
        if value is None:
            logger.debug(f"No valuation for {i.account} {i.amount}.")
            return None
        balance += value
    return balance

def check_posting(posting, lines: list[str] | None = None) -> None:
    posting.validate(lines)
    balance = posting_balance(posting)
    if balance is None:
        # An elided transfer absorbs the difference.
        return None
    if balance:
        raise BalanceError(
            f"Posting unbalanced by {balance}.", posting, lines)
