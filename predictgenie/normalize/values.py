"""Strict numeric parsing and category inference for untyped input."""

import math
import re
from typing import Any, Optional, Union

Number = Union[int, float]

# Optional minus, digits, optional single fraction part. No exponent, no separators.
STRICT_NUMBER_RE = re.compile(r"^-?\d+(\.\d+)?$")

# Optionally signed run of digits
INTEGER_LITERAL_RE = re.compile(r"^[+-]?\d+$")

# Decimal literal with optional sign, dot on either side and optional exponent
DECIMAL_LITERAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Unsigned hex/octal/binary integer literals
PREFIXED_INT_RE = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")

# Keyword -> category, checked in order; first match wins
CATEGORY_KEYWORDS = [
    (("shoe", "sneaker"), "footwear"),
    (("phone", "mobile"), "electronics"),
    (("shirt", "t-shirt"), "apparel"),
]

DEFAULT_CATEGORY = "general"


def parse_strict_number(value: Any) -> Optional[Number]:
    """
    Parse a value into a finite number, rejecting anything loosely numeric.

    Numbers are accepted as-is when finite. Strings are accepted only when the
    trimmed text is an optionally negative integer or decimal ("12", "-4.5");
    "1e3", "1,000", "12abc" and "" are all rejected.

    Args:
        value: Untyped input (number, string or anything else)

    Returns:
        The parsed number, or None when the input is not strictly numeric
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None

    if isinstance(value, str):
        trimmed = value.strip()
        match = STRICT_NUMBER_RE.match(trimmed)
        if match:
            return float(trimmed) if match.group(1) else int(trimmed)

    return None


def coerce_number(text: str) -> Optional[Number]:
    """
    Coerce text into a finite number using general numeric literal rules.

    Looser than parse_strict_number: exponents ("1e3"), a leading plus sign,
    bare fractions (".5", "5.") and unsigned hex/octal/binary integers
    ("0x1F") are accepted. Whitespace-only text coerces to 0. Integer
    literals come back as int ("2499" -> 2499), everything else as float.

    Returns:
        The number, or None when the text is not numeric or not finite
    """
    trimmed = text.strip()
    if not trimmed:
        return 0

    if INTEGER_LITERAL_RE.match(trimmed):
        return int(trimmed)

    if DECIMAL_LITERAL_RE.match(trimmed):
        number = float(trimmed)
        return number if math.isfinite(number) else None

    if PREFIXED_INT_RE.match(trimmed):
        return int(trimmed, 0)

    return None


def format_number(value: Number) -> str:
    """Render a number the way it appears on the wire: 500.0 -> "500", 4.5 -> "4.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def infer_category(name: Optional[str]) -> str:
    """
    Infer a coarse product category from a free-text product name.

    Case-insensitive substring match against CATEGORY_KEYWORDS.

    Returns:
        Category name, "general" when nothing matches
    """
    lowered = (name or "").lower()
    for keywords, category in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
