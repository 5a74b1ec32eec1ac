"""
Totals reconciliation for receipts.

Each figure prefers an explicit upstream value and falls back to one derived
from the normalized line items. Derived figures are rounded to cents and
every figure is non-negative.
"""
from typing import Any, Dict, Iterable, Optional

from receipt_norm import field_aliases as aliases
from receipt_norm.models import ReceiptItem, ReceiptTotals
from receipt_norm.utils import parse_money, resolve_money, round2, sum_money


def explicit_money(raw: Dict[str, Any], field_name: str) -> float:
    """First non-zero upstream figure for a totals field, else 0."""
    return resolve_money(raw, aliases.TOTALS_FIELDS[field_name])


def change_from_notes(notes: Optional[str]) -> float:
    """Pull a change amount out of free text such as "Change given: ৳100"."""
    if not notes:
        return 0.0
    match = aliases.CHANGE_NOTE_PATTERN.search(notes)
    return parse_money(match.group('amount')) if match else 0.0


def payments_sum(raw: Dict[str, Any]) -> float:
    """Sum of `amount` over a payments array; 0 when there is none."""
    payments = raw.get(aliases.PAYMENTS)
    if not isinstance(payments, list):
        return 0.0
    return sum_money(
        parse_money(payment.get('amount')) for payment in payments if isinstance(payment, dict)
    )


def _positive(value: float) -> float:
    return value if value > 0 else 0.0


def reconcile_totals(raw: Dict[str, Any], items: Iterable[ReceiptItem],
                     notes: Optional[str] = None) -> ReceiptTotals:
    """
    Build ReceiptTotals for a raw order and its normalized items.

    change is the largest of the explicit change field, a change amount
    written in the notes, and the overpayment. Upstream systems record
    change in different places and are not required to agree.
    """
    items = list(items)

    subtotal = _positive(explicit_money(raw, 'subtotal')) or sum_money(i.line_total for i in items)
    discount = _positive(explicit_money(raw, 'discount')) or sum_money(i.discount for i in items)
    tax = _positive(explicit_money(raw, 'tax'))
    shipping = _positive(explicit_money(raw, 'shipping'))

    total = _positive(explicit_money(raw, 'total'))
    if not total:
        total = max(0.0, round2(subtotal - discount + tax + shipping))

    paid = _positive(explicit_money(raw, 'paid')) or _positive(payments_sum(raw))

    due = _positive(explicit_money(raw, 'due'))
    if not due:
        due = max(0.0, round2(total - paid))

    change = max(
        _positive(explicit_money(raw, 'change')),
        _positive(change_from_notes(notes)),
        max(0.0, round2(paid - total)),
    )

    return ReceiptTotals(
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        shipping=shipping,
        total=total,
        paid=paid,
        due=due,
        change=change,
    )
