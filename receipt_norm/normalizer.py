"""
Order to receipt normalizer.

Accepts an order from the social-commerce UI, the point of sale or the
backend API and reduces it to one canonical ReceiptOrder. Missing or
wrong-typed fields degrade to defaults; the normalizer does not reject
incomplete orders.
"""

import logging
from typing import Any, Dict, List

from receipt_norm.header import resolve_header
from receipt_norm.items import extract_items
from receipt_norm.models import ReceiptOrder
from receipt_norm.totals import reconcile_totals

logger = logging.getLogger(__name__)


def canonicalize(raw_order: Any) -> ReceiptOrder:
    """
    Normalize one raw order into a ReceiptOrder.

    Args:
        raw_order: Order dictionary in any of the known upstream shapes.
            Anything that is not a dictionary is treated as an empty order.

    Returns:
        A new, immutable ReceiptOrder.
    """
    raw: Dict[str, Any] = raw_order if isinstance(raw_order, dict) else {}

    header = resolve_header(raw)
    items = extract_items(raw)
    totals = reconcile_totals(raw, items, notes=header['notes'])

    logger.debug(f"Canonicalized order '{header['order_no']}' with {len(items)} line(s)")

    return ReceiptOrder(items=tuple(items), totals=totals, **header)


def canonicalize_batch(raw_orders: Any) -> List[ReceiptOrder]:
    """Normalize a list of raw orders, preserving order. Non-lists yield []."""
    if not isinstance(raw_orders, list):
        return []
    return [canonicalize(order) for order in raw_orders]
