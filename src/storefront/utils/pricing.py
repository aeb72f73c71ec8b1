CURRENCY_SYMBOL = "₵"


def format_price(amount: float) -> str:
    """Render an amount as cedis with thousands separators, e.g. ``₵1,234.50``."""
    return f"{CURRENCY_SYMBOL}{amount:,.2f}"
