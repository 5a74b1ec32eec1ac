"""
Receipt consistency audit with deterministic note tokens.

The audit is informational: it reports where upstream figures disagree with
what the line items imply, but never changes or rejects a receipt.
"""

from typing import Any, Dict, List, Optional, Tuple

from receipt_norm.models import ReceiptOrder
from receipt_norm.normalizer import canonicalize
from receipt_norm.totals import change_from_notes, explicit_money
from receipt_norm.utils import round2, sum_money

# Numeric tolerance factor: 0.5%
TOLERANCE_FACTOR = 0.005


def _is_within_tolerance(value1: float, value2: float, tolerance: float = TOLERANCE_FACTOR) -> bool:
    """
    Check if two amounts are within tolerance.

    Uses relative tolerance: |value1 - value2| <= max(|value1|, |value2|) * tolerance
    """
    diff = abs(value1 - value2)
    max_val = max(abs(value1), abs(value2))

    if max_val == 0:
        return diff == 0

    return diff <= max_val * tolerance


def _check_items(receipt: ReceiptOrder) -> List[str]:
    if not receipt.items:
        return ['items:none']
    return []


def _check_totals(raw: Dict[str, Any], receipt: ReceiptOrder) -> List[str]:
    notes = []
    totals = receipt.totals

    # explicit subtotal vs sum of line totals
    explicit_subtotal = explicit_money(raw, 'subtotal')
    if explicit_subtotal > 0 and receipt.items:
        line_sum = sum_money(item.line_total for item in receipt.items)
        if not _is_within_tolerance(explicit_subtotal, line_sum):
            notes.append('totals:explicit_subtotal_differs')

    # explicit total vs subtotal - discount + tax + shipping
    explicit_total = explicit_money(raw, 'total')
    if explicit_total > 0:
        derived = max(0.0, round2(totals.subtotal - totals.discount + totals.tax + totals.shipping))
        if not _is_within_tolerance(explicit_total, derived):
            notes.append('totals:explicit_total_differs')

    return notes


def _check_change(raw: Dict[str, Any], receipt: ReceiptOrder) -> List[str]:
    totals = receipt.totals
    candidates = [
        explicit_money(raw, 'change'),
        change_from_notes(receipt.notes),
        max(0.0, round2(totals.paid - totals.total)),
    ]
    positive = [c for c in candidates if c > 0]

    if positive and not all(_is_within_tolerance(positive[0], c) for c in positive[1:]):
        return ['change:sources_disagree']
    return []


def audit_receipt(raw_order: Any, receipt: Optional[ReceiptOrder] = None) -> Dict[str, Any]:
    """
    Audit a single order.

    Args:
        raw_order: The raw upstream order.
        receipt: Its canonical receipt; computed when not given.

    Returns:
        Dictionary with keys:
        - order_no: Canonical order number
        - consistent: True when no notes were raised
        - notes: List of note token strings
    """
    raw = raw_order if isinstance(raw_order, dict) else {}
    if receipt is None:
        receipt = canonicalize(raw)

    notes = []
    notes.extend(_check_items(receipt))
    notes.extend(_check_totals(raw, receipt))
    notes.extend(_check_change(raw, receipt))

    return {
        'order_no': receipt.order_no,
        'consistent': len(notes) == 0,
        'notes': notes,
    }


def _detect_duplicates(receipts: List[ReceiptOrder]) -> Dict[Tuple[str, str], List[int]]:
    """Map (order_no, store_name) -> indices for order numbers seen more than once."""
    seen = {}
    duplicates = {}

    for idx, receipt in enumerate(receipts):
        if not receipt.order_no:
            continue
        key = (receipt.order_no, receipt.store_name or '')

        if key in seen:
            if key not in duplicates:
                duplicates[key] = [seen[key]]
            duplicates[key].append(idx)
        else:
            seen[key] = idx

    return duplicates


def audit_batch(raw_orders: List[Any]) -> Dict[str, Any]:
    """
    Audit a batch of orders, including duplicate order numbers.

    Returns:
        Dictionary with keys:
        - per_order: List of audit results (same format as audit_receipt)
        - summary: Dictionary with aggregate statistics
    """
    raw_orders = raw_orders if isinstance(raw_orders, list) else []
    receipts = [canonicalize(raw) for raw in raw_orders]
    duplicate_map = _detect_duplicates(receipts)
    duplicate_indices = {idx for indices in duplicate_map.values() for idx in indices}

    per_order = []
    for idx, (raw, receipt) in enumerate(zip(raw_orders, receipts)):
        result = audit_receipt(raw, receipt)
        if idx in duplicate_indices:
            result['notes'].append('anomaly:duplicate_order_no')
            result['consistent'] = False
        per_order.append(result)

    note_counts = {}
    for result in per_order:
        for note in result['notes']:
            note_counts[note] = note_counts.get(note, 0) + 1

    consistent_count = sum(1 for r in per_order if r['consistent'])

    summary = {
        'total_orders': len(per_order),
        'consistent_count': consistent_count,
        'flagged_count': len(per_order) - consistent_count,
        'note_counts': note_counts,
        'duplicate_groups': len(duplicate_map),
    }

    return {
        'per_order': per_order,
        'summary': summary,
    }
