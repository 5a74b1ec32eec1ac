"""
Coercion helpers for the receipt normalizer.

Every helper here degrades instead of raising: malformed money becomes 0,
unparsable dates are returned as given, non-text values become "".
"""
import logging
import math
import re
from datetime import datetime
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, List, Optional, Sequence

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Rendering used for ReceiptOrder.dateTime
DATETIME_FORMAT = '%m/%d/%Y, %I:%M:%S %p'

_MONEY_STRIP = re.compile(r'[^0-9.+\-]')
_LEADING_NUMBER = re.compile(r'^[+-]?(?:\d+(?:\.\d*)?|\.\d+)')

CENT = Decimal('0.01')

# Wide enough to quantize any finite float to cents
MONEY_CONTEXT = Context(prec=400)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_money(value: Any) -> float:
    """
    Convert a money-like value to a float.

    Numbers pass through when finite. Strings lose every character that is
    not a digit, '.', '+' or '-', then the leading numeric part is parsed,
    so currency symbols, thousands separators and labels are tolerated.
    Anything else yields 0.
    """
    if _is_number(value):
        return float(value) if math.isfinite(value) else 0.0
    if not isinstance(value, str):
        return 0.0

    cleaned = _MONEY_STRIP.sub('', value.strip())
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0
    try:
        amount = float(match.group(0))
    except ValueError:
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def to_number(value: Any) -> float:
    """Quantity coercion: numbers and numeric strings, else 0."""
    if _is_number(value):
        return float(value) if math.isfinite(value) else 0.0
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
        return number if math.isfinite(number) else 0.0
    return 0.0


def safe_string(value: Any) -> str:
    """Strings as-is, numbers as decimal text, everything else empty."""
    if isinstance(value, str):
        return value
    if _is_number(value):
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)
    return ''


def round2(value: float) -> float:
    """Round half-up to cents."""
    try:
        with localcontext(MONEY_CONTEXT):
            return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return 0.0


def _now() -> datetime:
    return datetime.now()


def format_date_time(value: Any) -> str:
    """
    Render a timestamp for the receipt header.

    An absent value renders the current time; a value dateutil cannot parse
    is returned unchanged.
    """
    text = safe_string(value).strip()
    if not text:
        return _now().strftime(DATETIME_FORMAT)

    try:
        parsed = date_parser.parse(text, fuzzy=False)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone()
        return parsed.strftime(DATETIME_FORMAT)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Unparsable date '{text}', keeping raw value")
        return text


def get_path(obj: Any, path: str) -> Any:
    """Look up a dotted path ("customer.name") through nested dicts."""
    current = obj
    for part in path.split('.'):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def first_present(obj: Any, paths: Sequence[str]) -> Any:
    """Return the first value under `paths` that is not None."""
    for path in paths:
        value = get_path(obj, path)
        if value is not None:
            return value
    return None


def resolve_string(obj: Any, paths: Sequence[str], default: str = '') -> str:
    """First non-empty string coercion among `paths`."""
    for path in paths:
        text = safe_string(get_path(obj, path)).strip()
        if text:
            return text
    return default


def resolve_money(obj: Any, paths: Sequence[str]) -> float:
    """First non-zero money coercion among `paths`, else 0."""
    for path in paths:
        amount = parse_money(get_path(obj, path))
        if amount:
            return amount
    return 0.0


def uniq_non_empty(lines: Iterable[str]) -> List[str]:
    """Trim, drop empties and keep the first occurrence of each line."""
    out: List[str] = []
    seen = set()
    for line in lines:
        text = (line or '').strip()
        if not text or text in seen:
            continue
        seen.add(text)
        out.append(text)
    return out


def sum_money(amounts: Iterable[float]) -> float:
    """Exact decimal sum of money values, rounded to cents."""
    with localcontext(MONEY_CONTEXT):
        total = Decimal('0')
        for amount in amounts:
            total += Decimal(str(amount))
        try:
            return float(total.quantize(CENT, rounding=ROUND_HALF_UP))
        except InvalidOperation:
            return 0.0


def optional_text(value: str) -> Optional[str]:
    return value or None
