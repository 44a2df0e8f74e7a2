from typing import NamedTuple

class Currency(NamedTuple):
    """An ISO 4217 currency."""
    entity: str
    currency: str
    alphabetic_code: str
    numeric_code: int
    minor_unit: int | None
    symbol: str | None = None

    @staticmethod
    def from_code_or_symbol(code: str | None) -> "Currency | None":
        if not code:
            return None
        if code in _BY_ALPHABETIC_CODE:
            return _BY_ALPHABETIC_CODE[code]
        return _BY_SYMBOL.get(code)

# Minor unit is None where ISO 4217 lists it as N.A. (precious metals).
CURRENCIES = [
    Currency("UNITED STATES", "US Dollar", "USD", 840, 2, "$"),
    Currency("EUROPEAN UNION", "Euro", "EUR", 978, 2, "€"),
    Currency("UNITED KINGDOM OF GREAT BRITAIN AND NORTHERN IRELAND (THE)",
             "Pound Sterling", "GBP", 826, 2, "£"),
    Currency("JAPAN", "Yen", "JPY", 392, 0, "¥"),
    Currency("INDIA", "Indian Rupee", "INR", 356, 2, "₹"),
    Currency("KOREA (THE REPUBLIC OF)", "Won", "KRW", 410, 0, "₩"),
    Currency("ISRAEL", "New Israeli Sheqel", "ILS", 376, 2, "₪"),
    Currency("NIGERIA", "Naira", "NGN", 566, 2, "₦"),
    Currency("PHILIPPINES (THE)", "Philippine Peso", "PHP", 608, 2, "₱"),
    Currency("UKRAINE", "Hryvnia", "UAH", 980, 2, "₴"),
    Currency("VIET NAM", "Dong", "VND", 704, 0, "₫"),
    Currency("THAILAND", "Baht", "THB", 764, 2, "฿"),
    Currency("TÜRKİYE", "Turkish Lira", "TRY", 949, 2, "₺"),
    Currency("RUSSIAN FEDERATION (THE)", "Russian Ruble", "RUB", 643, 2, "₽"),
    Currency("PARAGUAY", "Guarani", "PYG", 600, 0, "₲"),
    Currency("COSTA RICA", "Costa Rican Colon", "CRC", 188, 2, "₡"),
    Currency("UNITED ARAB EMIRATES (THE)", "UAE Dirham", "AED", 784, 2),
    Currency("ARGENTINA", "Argentine Peso", "ARS", 32, 2),
    Currency("AUSTRALIA", "Australian Dollar", "AUD", 36, 2),
    Currency("BAHRAIN", "Bahraini Dinar", "BHD", 48, 3),
    Currency("BRAZIL", "Brazilian Real", "BRL", 986, 2),
    Currency("CANADA", "Canadian Dollar", "CAD", 124, 2),
    Currency("SWITZERLAND", "Swiss Franc", "CHF", 756, 2),
    Currency("CHILE", "Chilean Peso", "CLP", 152, 0),
    Currency("CHINA", "Yuan Renminbi", "CNY", 156, 2),
    Currency("COLOMBIA", "Colombian Peso", "COP", 170, 2),
    Currency("CZECHIA", "Czech Koruna", "CZK", 203, 2),
    Currency("DENMARK", "Danish Krone", "DKK", 208, 2),
    Currency("DOMINICAN REPUBLIC (THE)", "Dominican Peso", "DOP", 214, 2),
    Currency("EGYPT", "Egyptian Pound", "EGP", 818, 2),
    Currency("GUATEMALA", "Quetzal", "GTQ", 320, 2),
    Currency("HONG KONG", "Hong Kong Dollar", "HKD", 344, 2),
    Currency("HONDURAS", "Lempira", "HNL", 340, 2),
    Currency("HUNGARY", "Forint", "HUF", 348, 2),
    Currency("INDONESIA", "Rupiah", "IDR", 360, 2),
    Currency("ICELAND", "Iceland Krona", "ISK", 352, 0),
    Currency("JORDAN", "Jordanian Dinar", "JOD", 400, 3),
    Currency("KENYA", "Kenyan Shilling", "KES", 404, 2),
    Currency("KUWAIT", "Kuwaiti Dinar", "KWD", 414, 3),
    Currency("MOROCCO", "Moroccan Dirham", "MAD", 504, 2),
    Currency("MEXICO", "Mexican Peso", "MXN", 484, 2),
    Currency("MALAYSIA", "Malaysian Ringgit", "MYR", 458, 2),
    Currency("NICARAGUA", "Cordoba Oro", "NIO", 558, 2),
    Currency("NORWAY", "Norwegian Krone", "NOK", 578, 2),
    Currency("NEW ZEALAND", "New Zealand Dollar", "NZD", 554, 2),
    Currency("PANAMA", "Balboa", "PAB", 590, 2),
    Currency("PERU", "Sol", "PEN", 604, 2),
    Currency("PAKISTAN", "Pakistan Rupee", "PKR", 586, 2),
    Currency("POLAND", "Zloty", "PLN", 985, 2),
    Currency("ROMANIA", "Romanian Leu", "RON", 946, 2),
    Currency("SAUDI ARABIA", "Saudi Riyal", "SAR", 682, 2),
    Currency("SWEDEN", "Swedish Krona", "SEK", 752, 2),
    Currency("SINGAPORE", "Singapore Dollar", "SGD", 702, 2),
    Currency("TAIWAN (PROVINCE OF CHINA)", "New Taiwan Dollar", "TWD", 901, 2),
    Currency("URUGUAY", "Peso Uruguayo", "UYU", 858, 2),
    Currency("SOUTH AFRICA", "Rand", "ZAR", 710, 2),
    Currency("ZZ07_Silver", "Silver", "XAG", 961, None),
    Currency("ZZ08_Gold", "Gold", "XAU", 959, None),
    Currency("ZZ10_Platinum", "Platinum", "XPT", 962, None),
]

_BY_ALPHABETIC_CODE = {c.alphabetic_code: c for c in CURRENCIES}
_BY_SYMBOL = {c.symbol: c for c in CURRENCIES if c.symbol}
