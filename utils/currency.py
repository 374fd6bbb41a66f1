def format_currency(amount: int, symbol: str = "Rp") -> str:
    """Format integer minor units as a currency string, e.g. 'Rp 1.234.500'."""
    return f"{symbol} {amount:,}".replace(",", ".")


def format_signed(amount: int, symbol: str = "Rp") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_currency(abs(amount), symbol)}"


def parse_amount(text: str) -> int:
    """Parse user input such as '100.000' or '100000' into an int. Raises ValueError."""
    cleaned = text.strip().replace(".", "").replace(",", "").replace(" ", "")
    if cleaned.lower().startswith("rp"):
        cleaned = cleaned[2:]
    if not cleaned.isdigit():
        raise ValueError(f"Invalid amount: {text!r}")
    return int(cleaned)
