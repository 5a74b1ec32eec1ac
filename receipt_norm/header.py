"""
Header resolution for receipts.

Resolves order identity, timestamp, store, salesperson, customer and the
customer's address lines from whichever aliased fields are present.
"""
from typing import Any, Dict, List, Union

from receipt_norm import field_aliases as aliases
from receipt_norm.utils import (
    first_present,
    format_date_time,
    get_path,
    optional_text,
    resolve_string,
    safe_string,
    uniq_non_empty,
)


def _resolve_id(raw: Dict[str, Any]) -> Union[int, str]:
    value = first_present(raw, aliases.ORDER_ID)
    if isinstance(value, bool):
        return ''
    if isinstance(value, (int, str)):
        return value
    return safe_string(value)


def _address_object_lines(address: Dict[str, Any]) -> List[str]:
    """One line per component: street, area+zone, city+district, division+postal."""
    lines = []
    for parts, separator in aliases.ADDRESS_COMPONENTS:
        values = [resolve_string(address, part) for part in parts]
        line = separator.join(v for v in values if v)
        if line:
            lines.append(line)
    return lines


def assemble_address_lines(raw: Dict[str, Any]) -> List[str]:
    """
    Build the customer's address lines.

    Delivery address first, then shipping address, then the flat customer
    address string. Lines are trimmed and de-duplicated (exact,
    case-sensitive), first occurrence wins.
    """
    lines: List[str] = []

    for source in (aliases.DELIVERY_ADDRESS, aliases.SHIPPING_ADDRESS):
        address = first_present(raw, source)
        if isinstance(address, dict):
            lines.extend(_address_object_lines(address))

    for path in aliases.CUSTOMER_ADDRESS:
        flat = get_path(raw, path)
        if isinstance(flat, str) and flat.strip():
            lines.append(flat)
            break

    return uniq_non_empty(lines)


def resolve_header(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Return the header fields of a ReceiptOrder as keyword arguments."""
    order_id = _resolve_id(raw)
    order_no = resolve_string(raw, aliases.ORDER_NO) or safe_string(order_id)

    return {
        'id': order_id,
        'order_no': order_no,
        'date_time': format_date_time(resolve_string(raw, aliases.ORDER_DATE)),
        'store_name': optional_text(resolve_string(raw, aliases.STORE_NAME)),
        'sales_by': optional_text(resolve_string(raw, aliases.SALES_BY)),
        'customer_name': optional_text(resolve_string(raw, aliases.CUSTOMER_NAME)),
        'customer_phone': optional_text(resolve_string(raw, aliases.CUSTOMER_PHONE)),
        'customer_address_lines': tuple(assemble_address_lines(raw)),
        'notes': optional_text(resolve_string(raw, aliases.NOTES)),
    }
