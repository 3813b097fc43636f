"""
Price Normalizer for the product preview engine.

Turns locale-ambiguous price text ("1.234,56", "1,234.56", "1 234,56 kr")
into a canonical string with "." as the only separator. The result stays a
string; numeric conversion and range checks belong to the caller.
"""
import re
from typing import Optional

# First maximal run of ASCII digits, spaces, dots and commas that starts and ends on a digit.
NUMERIC_RUN = re.compile(r"[0-9](?:[0-9 .,]*[0-9])?")


def normalize_price(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a raw price string.

    Args:
        raw: Price text as found on the page, currency and all

    Returns:
        Canonical numeric string, or None if no number is present
    """
    if raw is None:
        return None

    cleaned = " ".join(str(raw).split())
    if not cleaned:
        return None

    match = NUMERIC_RUN.search(cleaned)
    if not match:
        return None

    number = match.group().replace(" ", "")
    has_comma = "," in number
    has_dot = "." in number

    if not has_comma and not has_dot:
        return number

    if has_comma and has_dot:
        # A thousands group never follows the fraction, so the later separator is decimal.
        decimal = "," if number.rfind(",") > number.rfind(".") else "."
        grouping = "." if decimal == "," else ","
        number = number.replace(grouping, "")
        whole, _, fraction = number.rpartition(decimal)
        return f"{whole.replace(decimal, '')}.{fraction}"

    separator = "," if has_comma else "."
    parts = number.split(separator)
    if len(parts) == 2 and 1 <= len(parts[1]) <= 2:
        return f"{parts[0]}.{parts[1]}"

    return "".join(parts)

