"""Fiat currency codes understood by the providers and by calc mode."""

FIAT_NAMES: dict[str, str] = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "JPY": "Japanese Yen",
    "CNY": "Chinese Yuan",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "CHF": "Swiss Franc",
    "KRW": "South Korean Won",
    "INR": "Indian Rupee",
    "BRL": "Brazilian Real",
    "RUB": "Russian Ruble",
    "TRY": "Turkish Lira",
    "ZAR": "South African Rand",
    "MXN": "Mexican Peso",
    "SGD": "Singapore Dollar",
    "HKD": "Hong Kong Dollar",
    "NOK": "Norwegian Krone",
    "SEK": "Swedish Krona",
    "DKK": "Danish Krone",
    "NZD": "New Zealand Dollar",
    "PLN": "Polish Zloty",
    "THB": "Thai Baht",
    "TWD": "New Taiwan Dollar",
    "CZK": "Czech Koruna",
    "HUF": "Hungarian Forint",
    "ILS": "Israeli Shekel",
    "PHP": "Philippine Peso",
    "MYR": "Malaysian Ringgit",
    "ARS": "Argentine Peso",
    "CLP": "Chilean Peso",
    "COP": "Colombian Peso",
    "IDR": "Indonesian Rupiah",
    "SAR": "Saudi Riyal",
    "AED": "UAE Dirham",
    "NGN": "Nigerian Naira",
    "VND": "Vietnamese Dong",
    "PKR": "Pakistani Rupee",
    "BDT": "Bangladeshi Taka",
    "EGP": "Egyptian Pound",
}

KNOWN_FIAT: frozenset[str] = frozenset(FIAT_NAMES)

# CoinGecko also quotes against a handful of crypto units.
COINGECKO_CURRENCIES: frozenset[str] = KNOWN_FIAT | {"BTC", "ETH", "BNB", "XRP", "SOL"}

COINMARKETCAP_CURRENCIES: frozenset[str] = KNOWN_FIAT | {"BTC", "ETH"}


def is_known_fiat(code: str) -> bool:
    """True when code (any case) is a recognized fiat currency code."""
    return code.upper() in KNOWN_FIAT


def fiat_name(code: str) -> str:
    """Human-readable fiat name; falls back to the code itself."""
    return FIAT_NAMES.get(code.upper(), code)
