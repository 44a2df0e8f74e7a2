from datetime import date
import re

from ptajournal.parser import Entity, ParseError
from ptajournal.commodity import Commodity, COMMODITY
from ptajournal.complex_commodity import ComplexCommodity
from ptajournal.ledger import PostingError
from ptajournal.printing import date2str

_TAG = re.compile(r'\A(.+?) *: *(.+)\Z')

class Tag():
    def __init__(self, key: str, value: str | None = None):
        self._key = key
        self._value = value
    @property
    def key(self):
        return self._key
    @property
    def value(self):
        return self._value
    @classmethod
    def from_s(cls, text: str) -> "Tag":
        text = text.strip()
        m = _TAG.match(text)
        if m:
            return cls(m.group(1), m.group(2))
        return cls(text)
    def __str__(self):
        if self.value is None:
            return self.key
        return f"{self.key}: {self.value}"
    def __hash__(self):
        return hash((self._key, self._value))
    def __eq__(self, other):
        if not isinstance(other, Tag):
            return NotImplemented
        return self.key == other.key and self.value == other.value
    def __repr__(self):
        return f"Tag({self.key!r}, {self.value!r})"

class Transfer(Entity):
    def __init__(self, account: str,
                 commodity: Commodity | None = None,
                 complex_commodity: ComplexCommodity | None = None,
                 tags: list[Tag] | None = None,
                 effective_date: date | None = None):
        super().__init__()
        if commodity is not None and complex_commodity is not None:
            raise ValueError(
                "A transfer takes a commodity or a complex commodity, "
                "not both.")
        self.account = account
        self.commodity = commodity
        self.complex_commodity = complex_commodity
        self.tags: list[Tag] = list(tags) if tags else []
        self.effective_date = effective_date

    @property
    def amount(self) -> Commodity | ComplexCommodity | None:
        if self.commodity is not None:
            return self.commodity
        return self.complex_commodity

    def __repr__(self):
        return f"Transfer({self.account!r}, {self.amount!r}, {self.tags!r})"

def parse_amount(text: str) -> Commodity | ComplexCommodity:
    """Try a plain commodity first, then the annotated forms."""
    text = text.strip()
    if text == "0" or COMMODITY.match(text):
        return Commodity.parse(text)
    return ComplexCommodity.parse(text)

class Posting(Entity):
    def __init__(self, date: date | None, description: str | None,
                 transfers: list[Transfer] | None = None,
                 tags: list[Tag] | None = None,
                 effective_date: date | None = None):
        super().__init__()
        self.date = date
        self.description = description
        self.transfers: list[Transfer] = list(transfers) if transfers else []
        self.tags: list[Tag] = list(tags) if tags else []
        self.effective_date = effective_date

    @classmethod
    def parse(cls, text: str) -> "Posting":
        """Parse the text of exactly one posting."""
        from ptajournal.journal import Journal
        postings = Journal.parse(text).postings
        if len(postings) != 1:
            raise ParseError(f"Expected one posting, found {len(postings)}")
        return postings[0]

    def append_transfer(self, account: str,
                        amount: str | Commodity | ComplexCommodity | None \
                            = None) -> Transfer:
        if isinstance(amount, str):
            amount = parse_amount(amount)
        if isinstance(amount, ComplexCommodity):
            transfer = Transfer(account, complex_commodity=amount)
        else:
            transfer = Transfer(account, commodity=amount)
        self.transfers.append(transfer)
        return transfer

    def append_tag(self, tag: Tag | str) -> None:
        """Tags land on the most recent transfer, or on the posting
        itself before any transfer exists."""
        if isinstance(tag, str):
            tag = Tag.from_s(tag)
        if self.transfers:
            self.transfers[-1].tags.append(tag)
        else:
            self.tags.append(tag)

    def _invalid_reason(self) -> str | None:
        if not self.date:
            return "Posting is missing a date."
        if not self.description:
            return "Posting is missing a description."
        if not self.transfers:
            return "Posting has no transfers."
        elided = [i for i in self.transfers if i.amount is None]
        if len(elided) == len(self.transfers):
            return "Posting has no transfer with an amount."
        if len(elided) > 1:
            return "More than one elided transfer not allowed."
        return None

    def is_valid(self) -> bool:
        return self._invalid_reason() is None

    def validate(self, lines: list[str] | None = None) -> None:
        reason = self._invalid_reason()
        if reason:
            raise PostingError(reason, self, lines)

    def to_ledger(self) -> str:
        self.validate()
        header = date2str(self.date)
        if self.effective_date:
            header += "=" + date2str(self.effective_date)
        lines = [f"{header} {self.description}"]
        if self.tags:
            lines.append("  ; " + ", ".join(str(i) for i in self.tags))
        width = max(len(i.account) for i in self.transfers
                    if i.amount is not None)
        for i in self.transfers:
            if i.amount is None:
                line = f"  {i.account}"
            else:
                line = f"  {i.account:<{width}}    {i.amount}"
            if i.effective_date:
                line += f"  ; [={date2str(i.effective_date)}]"
            lines.append(line)
            lines.extend(f"  ; {tag}" for tag in i.tags)
        return "\n".join(lines)

    def __str__(self):
        return self.to_ledger()

    def __repr__(self):
        return (f"Posting({self.date}, {self.description!r}, "
                f"{len(self.transfers)} transfers)")
