from decimal import Decimal, Context, ROUND_HALF_UP
from datetime import date, datetime, time
import re

_CONTEXT = Context(prec=200, rounding=ROUND_HALF_UP)

# Codes matching this are written bare; anything else is double quoted.
_BARE_CODE = re.compile(r'[^\s\-\d"{}\[\]()@=;,.]+')

# https://docs.python.org/3/library/decimal.html#decimal.getcontext
def moneyfmt(value: Decimal, places: int = 2, sep: str = ',',
             dp: str = '.', neg: str = '-') -> str:
    """Convert Decimal to a money formatted string.

    places:  required number of places after the decimal point
    sep:     optional grouping separator (comma, period, space, or blank)
    dp:      decimal point indicator

    >>> moneyfmt(Decimal('-1234567.8951'))
    '-1,234,567.90'
    >>> moneyfmt(Decimal('123456789'), places=0, sep='')
    '123456789'
    """
    q = Decimal(10) ** -places      # 2 places --> '0.01'
    sign, digits, exp = value.quantize(q, context=_CONTEXT).as_tuple()
    result = []
    digits = list(map(str, digits))
    build, next = result.append, digits.pop
    for i in range(places):
        build(next() if digits else '0')
    if places:
        build(dp)
    if not digits:
        build('0')
    i = 0
    while digits:
        build(next())
        i += 1
        if i == 3 and digits:
            i = 0
            build(sep)
    if sign and any(d != '0' for d in result if d.isdigit()):
        build(neg)
    return ''.join(reversed(result))

def decimal2str(value: Decimal) -> str:
    """Shortest plain notation, no exponent and no trailing zeros."""
    value = value.normalize(_CONTEXT)
    if value.is_zero():
        return "0"
    return format(value, 'f')

def code2str(code: str) -> str:
    if _BARE_CODE.fullmatch(code):
        return code
    return f'"{code}"'

def date2str(x: date) -> str:
    return x.strftime('%Y-%m-%d')

def datetime2str(x: datetime) -> str:
    if x.time() == time():
        return date2str(x)
    return x.strftime('%Y-%m-%d %H:%M:%S')
