"""Currency detection, conversion and display helpers.

Company funding amounts are stored in USD. Users browse in their own
currency, so every amount typed in the UI is converted to USD before it
reaches the query layer, and converted back for display.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)

# Primary currency per locale
LOCALE_TO_CURRENCY = {
    # English locales
    "en-US": "USD",
    "en-CA": "CAD",
    "en-GB": "GBP",
    "en-AU": "AUD",
    "en-NZ": "NZD",
    "en-IE": "EUR",
    # European locales
    "fr-FR": "EUR",
    "de-DE": "EUR",
    "es-ES": "EUR",
    "it-IT": "EUR",
    "pt-PT": "EUR",
    "nl-NL": "EUR",
    "be-BE": "EUR",
    "at-AT": "EUR",
    "fi-FI": "EUR",
    "gr-GR": "EUR",
    # Other major currencies
    "ja-JP": "JPY",
    "ko-KR": "KRW",
    "zh-CN": "CNY",
    "zh-TW": "TWD",
    "zh-HK": "HKD",
    "ru-RU": "RUB",
    "pl-PL": "PLN",
    "cz-CZ": "CZK",
    "hu-HU": "HUF",
    "tr-TR": "TRY",
    "br-BR": "BRL",
    "pt-BR": "BRL",
    "mx-MX": "MXN",
    "ar-SA": "SAR",
    "he-IL": "ILS",
    "th-TH": "THB",
    "id-ID": "IDR",
    "my-MY": "MYR",
    "sg-SG": "SGD",
    "ph-PH": "PHP",
    "vn-VN": "VND",
    "in-IN": "INR",
    "pk-PK": "PKR",
    "bd-BD": "BDT",
    "lk-LK": "LKR",
    "np-NP": "NPR",
    "ch-CH": "CHF",
    "no-NO": "NOK",
    "se-SE": "SEK",
    "dk-DK": "DKK",
    "is-IS": "ISK",
}

# Fallback by language code only
LANGUAGE_TO_CURRENCY = {
    "en": "USD",
    "fr": "EUR",
    "de": "EUR",
    "es": "EUR",
    "it": "EUR",
    "pt": "EUR",
    "nl": "EUR",
    "ja": "JPY",
    "ko": "KRW",
    "zh": "CNY",
    "ru": "RUB",
    "pl": "PLN",
    "tr": "TRY",
    "ar": "SAR",
    "he": "ILS",
    "th": "THB",
    "id": "IDR",
    "my": "MYR",
    "vi": "VND",
    "hi": "INR",
    "bn": "BDT",
    "ur": "PKR",
}

# Units of each currency per 1 USD
EXCHANGE_RATES = {
    "USD": 1.0,
    "EUR": 0.85,
    "GBP": 0.73,
    "JPY": 110.0,
    "CAD": 1.25,
    "AUD": 1.35,
    "CHF": 0.92,
    "CNY": 6.45,
    "KRW": 1180.0,
    "INR": 74.5,
    "BRL": 5.2,
    "MXN": 20.1,
    "RUB": 73.5,
    "TRY": 8.5,
    "PLN": 3.8,
    "SEK": 8.6,
    "NOK": 8.5,
    "DKK": 6.3,
    "CZK": 21.5,
    "HUF": 295.0,
    "THB": 31.5,
    "SGD": 1.35,
    "HKD": 7.8,
    "NZD": 1.42,
    "ZAR": 14.2,
    "ILS": 3.2,
    "SAR": 3.75,
    "AED": 3.67,
    "MYR": 4.1,
    "IDR": 14250.0,
    "PHP": 49.5,
    "VND": 22800.0,
    "TWD": 27.8,
    "PKR": 155.0,
    "BDT": 84.5,
    "LKR": 180.0,
    "NPR": 119.0,
    "ISK": 125.0,
}

CURRENCY_NAMES = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "CHF": "Swiss Franc",
    "CNY": "Chinese Yuan",
    "KRW": "South Korean Won",
    "INR": "Indian Rupee",
    "BRL": "Brazilian Real",
    "MXN": "Mexican Peso",
    "RUB": "Russian Ruble",
    "TRY": "Turkish Lira",
    "PLN": "Polish Złoty",
    "SEK": "Swedish Krona",
    "NOK": "Norwegian Krone",
    "DKK": "Danish Krone",
    "CZK": "Czech Koruna",
    "HUF": "Hungarian Forint",
    "THB": "Thai Baht",
    "SGD": "Singapore Dollar",
    "HKD": "Hong Kong Dollar",
    "NZD": "New Zealand Dollar",
    "ZAR": "South African Rand",
    "ILS": "Israeli Shekel",
    "SAR": "Saudi Riyal",
    "AED": "UAE Dirham",
    "MYR": "Malaysian Ringgit",
    "IDR": "Indonesian Rupiah",
    "PHP": "Philippine Peso",
    "VND": "Vietnamese Dong",
    "TWD": "Taiwan Dollar",
    "PKR": "Pakistani Rupee",
    "BDT": "Bangladeshi Taka",
    "LKR": "Sri Lankan Rupee",
    "NPR": "Nepalese Rupee",
    "ISK": "Icelandic Króna",
}

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "CHF",
    "CNY": "¥",
    "KRW": "₩",
    "INR": "₹",
    "BRL": "R$",
    "MXN": "$",
    "RUB": "₽",
    "TRY": "₺",
    "PLN": "zł",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "CZK": "Kč",
    "HUF": "Ft",
    "THB": "฿",
    "SGD": "S$",
    "HKD": "HK$",
    "NZD": "NZ$",
    "ZAR": "R",
    "ILS": "₪",
    "SAR": "﷼",
    "AED": "د.إ",
    "MYR": "RM",
    "IDR": "Rp",
    "PHP": "₱",
    "VND": "₫",
    "TWD": "NT$",
    "PKR": "₨",
    "BDT": "৳",
    "LKR": "Rs",
    "NPR": "Rs",
    "ISK": "kr",
}

_COMPACT_UNITS = [
    (1, ""),
    (1_000, "K"),
    (1_000_000, "M"),
    (1_000_000_000, "B"),
    (1_000_000_000_000, "T"),
]


@dataclass
class CurrencyInfo:
    """Currency resolved for a locale, with a bound converter."""

    currency: str
    currency_name: str
    convert_from_usd: Callable[[float], float]


def get_currency_from_locale(locale: str) -> str:
    """
    Get the currency code for a locale.

    Tries the exact locale first ("en-GB"), then the language code alone
    ("en"), and falls back to USD.

    Args:
        locale: BCP 47 style locale string

    Returns:
        ISO currency code
    """
    if not locale:
        return "USD"

    if locale in LOCALE_TO_CURRENCY:
        return LOCALE_TO_CURRENCY[locale]

    language_code = locale.split("-")[0]
    if language_code in LANGUAGE_TO_CURRENCY:
        return LANGUAGE_TO_CURRENCY[language_code]

    return "USD"


def _lookup_rate(currency: str, rates: Optional[Mapping[str, float]]) -> Optional[float]:
    table = EXCHANGE_RATES if rates is None else rates
    rate = table.get(currency)
    if not rate:
        logger.warning("Exchange rate not found for currency: %s", currency)
        return None
    return rate


def convert_currency(
    amount_usd: float,
    target_currency: str,
    rates: Optional[Mapping[str, float]] = None,
) -> float:
    """
    Convert an amount from USD to the target currency.

    Unknown currencies are converted 1:1.

    Args:
        amount_usd: Amount in USD
        target_currency: ISO currency code to convert into
        rates: Optional rate table (defaults to EXCHANGE_RATES)

    Returns:
        Amount in the target currency
    """
    rate = _lookup_rate(target_currency, rates)
    if rate is None:
        return amount_usd
    return amount_usd * rate


def convert_to_usd(
    amount: float,
    from_currency: str,
    rates: Optional[Mapping[str, float]] = None,
) -> float:
    """
    Convert an amount in any currency to USD.

    Unknown currencies are converted 1:1.

    Args:
        amount: Amount in from_currency
        from_currency: ISO currency code of the amount
        rates: Optional rate table (defaults to EXCHANGE_RATES)

    Returns:
        Amount in USD
    """
    rate = _lookup_rate(from_currency, rates)
    if rate is None:
        return amount
    return amount / rate


def convert_filter_to_usd(
    amount: Optional[float],
    from_currency: str,
    rates: Optional[Mapping[str, float]] = None,
) -> Optional[float]:
    """Convert a filter bound to USD; unset bounds (None or 0) stay unset."""
    if not amount:
        return None
    return convert_to_usd(amount, from_currency, rates)


def convert_filter_from_usd(
    amount: Optional[float],
    to_currency: str,
    rates: Optional[Mapping[str, float]] = None,
) -> Optional[float]:
    """Convert a USD filter bound for display; unset bounds (None or 0) stay unset."""
    if not amount:
        return None
    return convert_currency(amount, to_currency, rates)


def get_currency_name(currency_code: str) -> str:
    """Human-readable currency name, or the code itself if unknown."""
    return CURRENCY_NAMES.get(currency_code, currency_code)


def get_currency_symbol(currency_code: str) -> str:
    """Currency symbol, or the code itself if unknown."""
    return CURRENCY_SYMBOLS.get(currency_code, currency_code)


def get_currency_info(locale: str) -> CurrencyInfo:
    """Resolve currency details for a locale."""
    currency = get_currency_from_locale(locale)
    return CurrencyInfo(
        currency=currency,
        currency_name=get_currency_name(currency),
        convert_from_usd=lambda amount_usd: convert_currency(amount_usd, currency),
    )


def _round_tenths(value: float) -> Decimal:
    return Decimal(repr(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def format_compact(amount: float, currency: str) -> str:
    """
    Format a money amount in compact notation.

    At most one fractional digit is kept: 5000000 -> "$5M",
    1250000 -> "$1.3M", 2000 in CHF -> "CHF 2K".

    Args:
        amount: Amount in the given currency
        currency: ISO currency code used to pick the symbol

    Returns:
        Compact display string
    """
    sign = "-" if amount < 0 else ""
    value = abs(amount)

    index = 0
    for i, (threshold, _) in enumerate(_COMPACT_UNITS):
        if value >= threshold:
            index = i

    threshold, suffix = _COMPACT_UNITS[index]
    scaled = _round_tenths(value / threshold)

    # 999.96K rounds to 1000.0K, which reads as 1M
    if scaled >= 1000 and index < len(_COMPACT_UNITS) - 1:
        threshold, suffix = _COMPACT_UNITS[index + 1]
        scaled = _round_tenths(value / threshold)

    number = f"{scaled:f}"
    if number.endswith(".0"):
        number = number[:-2]

    symbol = get_currency_symbol(currency)
    if symbol[-1:].isalpha():
        symbol += " "

    return f"{sign}{symbol}{number}{suffix}"


def format_currency_label(value: float, kind: str, currency: str) -> str:
    """
    Badge label for a funding bound, e.g. "Min $5M".

    Args:
        value: Amount in the given currency
        kind: "min" or "max"
        currency: ISO currency code

    Returns:
        Label string
    """
    prefix = "Min" if kind == "min" else "Max"
    return f"{prefix} {format_compact(value, currency)}"
