# fashion_search/filters/price_parser.py

"""Price extraction from heterogeneous free-text price strings.

Upstream sources report prices as ``"₹1,299.00"``, ``"Rs. 999"``,
``"999/-"``, bare numbers, or not at all (in which case the title
sometimes carries one).  Everything here is pure and never raises.
"""

import math
import re
import statistics

from fashion_search.config.settings import Settings

# A digit run that may contain grouping/decimal separators.
_NUM = r"\d(?:[\d.,]*\d)?"

_SYMBOL_RE = re.compile(rf"[₹$€£]\s*({_NUM})")
_BARE_RE = re.compile(rf"^\s*({_NUM})\s*$")
_LABELLED_RE = re.compile(
    rf"(?:\brs\.?|\binr\b|\bprice\s*:?)\s*({_NUM})",
    re.IGNORECASE,
)
_SUFFIXED_RE = re.compile(
    rf"({_NUM})\s*(?:/-|\bonly\b)",
    re.IGNORECASE,
)
_ANY_NUM_RE = re.compile(rf"({_NUM})")

PLAUSIBLE_MIN: float = 100.0
PLAUSIBLE_MAX: float = 999_999.0


def _to_float(token: str) -> float | None:
    """Convert a number with US, Indian or European grouping to float."""
    token = token.strip(".,")
    if not token:
        return None
    has_dot = "." in token
    has_comma = "," in token

    if has_dot and has_comma:
        # The right-most separator is the decimal point
        if token.rfind(",") > token.rfind("."):
            token = token.replace(".", "").replace(",", ".")
        else:
            token = token.replace(",", "")
    elif has_comma:
        head, _, tail = token.rpartition(",")
        if token.count(",") == 1 and len(tail) == 2:
            token = f"{head}.{tail}"       # "999,00"
        else:
            token = token.replace(",", "")
    elif has_dot and token.count(".") > 1:
        token = token.replace(".", "")     # "1.299.000"

    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _first(pattern: re.Pattern[str], text: str) -> float | None:
    match = pattern.search(text)
    return _to_float(match.group(1)) if match else None


def _labelled(text: str) -> float | None:
    value = _first(_LABELLED_RE, text)
    if value is None:
        value = _first(_SUFFIXED_RE, text)
    return value


def _median_candidate(text: str) -> float | None:
    """Median of the plausible 3+-digit numbers embedded in *text*.

    Picking the median rather than the first or the largest keeps SKU
    numbers and shipping fees from winning.
    """
    candidates: list[float] = []
    for token in _ANY_NUM_RE.findall(text):
        if sum(ch.isdigit() for ch in token) < 3:
            continue
        value = _to_float(token)
        if value is not None and PLAUSIBLE_MIN <= value <= PLAUSIBLE_MAX:
            candidates.append(value)
    if not candidates:
        return None
    return float(statistics.median_low(candidates))


def parse_price(raw: str | int | float | None) -> float | None:
    """Extract a numeric price, or ``None`` when no digits are present."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
        return value if math.isfinite(value) else None

    text = str(raw)
    if not any(ch.isdigit() for ch in text):
        return None

    for step in (
        lambda t: _first(_SYMBOL_RE, t),
        lambda t: _first(_BARE_RE, t),
        _labelled,
        _median_candidate,
        lambda t: _first(_ANY_NUM_RE, t),
    ):
        value = step(text)
        if value is not None:
            return value
    return None


def extract_price_from_title(title: str | None) -> float | None:
    """Strict price lookup for product titles.

    Only currency-prefixed, labelled, or plausible 3+-digit numbers
    count, so sizes and pack counts ("Size 42", "Pack of 3") are
    never mistaken for a price.
    """
    if not title:
        return None
    for step in (
        lambda t: _first(_SYMBOL_RE, t),
        _labelled,
        _median_candidate,
    ):
        value = step(title)
        if value is not None:
            return value
    return None


def format_price(value: float, symbol: str | None = None) -> str:
    """Canonical display form: one currency symbol and an integer amount."""
    return f"{symbol or Settings.CURRENCY_SYMBOL}{round(value)}"
