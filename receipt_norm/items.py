"""
Line-item extraction for receipts.

Walks the product, generic item and service collections of a raw order,
classifies each row as product or service, resolves its amounts, explodes
rows that carry one barcode per unit, and suppresses rows already emitted
from another collection.
"""
import logging
import math
from dataclasses import replace
from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP, localcontext
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from receipt_norm import field_aliases as aliases
from receipt_norm.models import ReceiptItem
from receipt_norm.utils import (
    CENT,
    MONEY_CONTEXT,
    first_present,
    optional_text,
    parse_money,
    resolve_string,
    round2,
    safe_string,
    to_number,
    uniq_non_empty,
)

logger = logging.getLogger(__name__)

PRODUCT = 'product'
SERVICE = 'service'


def looks_like_service(row: Dict[str, Any]) -> bool:
    """A row is a service if it has a service id/flag or type == "service"."""
    if any(row.get(marker) for marker in aliases.SERVICE_MARKERS):
        return True
    return resolve_string(row, aliases.ITEM_TYPE).lower() == SERVICE


def _resolve_barcodes(row: Dict[str, Any]) -> Optional[Tuple[str, ...]]:
    values = first_present(row, aliases.ITEM_BARCODES)
    if isinstance(values, (list, tuple)):
        codes = uniq_non_empty(safe_string(v) for v in values)
    else:
        single = safe_string(first_present(row, aliases.ITEM_BARCODE))
        codes = uniq_non_empty([single])
    return tuple(codes) if codes else None


def normalize_row(row: Dict[str, Any], kind: str) -> Optional[ReceiptItem]:
    """
    Resolve one raw row into a ReceiptItem.

    Returns None when the row has no name, no quantity and no total.
    """
    qty = max(0.0, to_number(first_present(row, aliases.ITEM_QTY)))
    unit_price = max(0.0, parse_money(first_present(row, aliases.ITEM_UNIT_PRICE)))
    discount = max(0.0, parse_money(first_present(row, aliases.ITEM_DISCOUNT)))
    explicit_total = parse_money(first_present(row, aliases.ITEM_TOTAL))

    # Some backends omit quantity for services; an amount implies one unit
    if qty <= 0 and (explicit_total > 0 or unit_price > 0):
        qty = 1.0

    if explicit_total > 0:
        line_total = explicit_total
    else:
        line_total = max(0.0, round2(qty * unit_price - discount))

    if kind == SERVICE:
        name = resolve_string(row, aliases.SERVICE_NAME)
        variant = resolve_string(row, aliases.SERVICE_VARIANT)
        default_name = aliases.DEFAULT_SERVICE_NAME
    else:
        name = resolve_string(row, aliases.PRODUCT_NAME)
        variant = resolve_string(row, aliases.PRODUCT_VARIANT)
        default_name = aliases.DEFAULT_PRODUCT_NAME

    if not name and qty <= 0 and line_total <= 0:
        return None

    return ReceiptItem(
        name=name or default_name,
        variant=optional_text(variant),
        qty=qty,
        unit_price=unit_price,
        line_total=line_total,
        discount=discount,
        barcodes=_resolve_barcodes(row),
    )


def distribute_amount(amount: float, parts: int) -> List[float]:
    """
    Split `amount` into `parts` cent values that sum back to it exactly.

    Every part but the last is round2(amount / parts); the last takes the
    remainder. If half-up shares would overshoot and leave the last part
    negative, shares are truncated to cents instead.
    """
    with localcontext(MONEY_CONTEXT):
        total = Decimal(str(amount))
        if parts <= 1:
            return [float(total.quantize(CENT, rounding=ROUND_HALF_UP))]

        share = (total / parts).quantize(CENT, rounding=ROUND_HALF_UP)
        if share * (parts - 1) > total:
            share = (total / parts).quantize(CENT, rounding=ROUND_DOWN)

        last = (total - share * (parts - 1)).quantize(CENT, rounding=ROUND_HALF_UP)
    return [float(share)] * (parts - 1) + [float(last)]


def split_units(item: ReceiptItem) -> List[ReceiptItem]:
    """
    Explode an aggregated row into one row per barcode.

    Only applies when the rounded quantity is above 1 and equals the number
    of distinct barcodes; otherwise the row is returned as-is.
    """
    units = int(math.floor(item.qty + 0.5))
    if units <= 1 or not item.barcodes or len(item.barcodes) != units:
        return [item]

    totals = distribute_amount(item.line_total, units)
    discounts = distribute_amount(item.discount, units)
    return [
        replace(item, qty=1.0, line_total=line_total, discount=discount, barcodes=(barcode,))
        for barcode, line_total, discount in zip(item.barcodes, totals, discounts)
    ]


def dedup_key(row: Dict[str, Any], item: ReceiptItem, kind: str) -> Tuple[Any, ...]:
    """
    Identity of a printed line.

    Rows with a stable id are keyed on the id; others on their printed
    content. The barcode set, batch and SKU are always part of the key so
    distinct units of one SKU are never merged.
    """
    barcodes = tuple(sorted(item.barcodes or ()))
    batch = resolve_string(row, aliases.ROW_BATCH)
    sku = resolve_string(row, aliases.ROW_SKU)
    stable_id = resolve_string(row, aliases.ROW_ID)

    if stable_id:
        return (kind, 'id', stable_id, barcodes, batch, sku)
    return (
        kind, 'row', item.name, item.variant or '', item.qty,
        item.unit_price, item.line_total, barcodes, batch, sku,
    )


def _first_list(raw: Dict[str, Any], names: Sequence[str]) -> List[Any]:
    for name in names:
        rows = raw.get(name)
        if isinstance(rows, list):
            return rows
    return []


def extract_items(raw: Dict[str, Any]) -> List[ReceiptItem]:
    """Normalize, split and de-duplicate every line of a raw order."""
    sources = [
        (_first_list(raw, aliases.PRODUCT_COLLECTIONS), None),
        (_first_list(raw, aliases.ITEM_COLLECTIONS), None),
        (_first_list(raw, aliases.SERVICE_COLLECTIONS), SERVICE),
    ]

    items: List[ReceiptItem] = []
    seen: Set[Tuple[Any, ...]] = set()

    for rows, forced_kind in sources:
        for row in rows:
            if not isinstance(row, dict):
                continue

            kind = forced_kind or (SERVICE if looks_like_service(row) else PRODUCT)
            item = normalize_row(row, kind)
            if item is None:
                logger.debug(f"Discarding empty {kind} row: {row!r}")
                continue

            for unit in split_units(item):
                key = dedup_key(row, unit, kind)
                if key in seen:
                    logger.debug(f"Suppressing duplicate {kind} line '{unit.name}'")
                    continue
                seen.add(key)
                items.append(unit)

    return items
