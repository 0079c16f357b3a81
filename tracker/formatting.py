from datetime import date

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "KZT": "₸"}


def format_currency(amount: float, currency: str = "USD") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_date(iso_date: str) -> str:
    d = date.fromisoformat(iso_date)
    return f"{d:%b} {d.day}, {d.year}"


def month_name(month_key: str) -> str:
    year, month = (int(p) for p in month_key.split("-"))
    return f"{date(year, month, 1):%B %Y}"
