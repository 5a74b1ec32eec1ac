"""
Print payload for receipt collaborators.

Adds what a POS print needs beyond the canonical receipt: how the paid
amount splits across payment methods, and the VAT figure when prices are
VAT-inclusive and no explicit tax was supplied.
"""
from typing import Any, Dict, List

from receipt_norm import field_aliases as aliases
from receipt_norm.normalizer import canonicalize
from receipt_norm.models import ReceiptOrder
from receipt_norm.utils import (
    get_path,
    parse_money,
    resolve_money,
    resolve_string,
    round2,
    safe_string,
    to_number,
)

KNOWN_METHODS = ('CASH', 'CARD', 'BKASH', 'NAGAD')


def normalize_method_label(raw_label: Any) -> str:
    """Map a free-form payment method name to CASH/CARD/BKASH/NAGAD, or ''."""
    label = safe_string(raw_label).strip().lower()
    if not label:
        return ''
    if 'cash' in label:
        return 'CASH'
    if 'card' in label or 'visa' in label or 'master' in label:
        return 'CARD'
    if 'bkash' in label or 'b-kash' in label or 'b kash' in label:
        return 'BKASH'
    if 'nagad' in label:
        return 'NAGAD'
    if 'mobile' in label or 'wallet' in label or 'mfs' in label:
        return 'BKASH'
    return ''


def _empty_breakdown() -> Dict[str, Any]:
    breakdown: Dict[str, Any] = {method: 0.0 for method in KNOWN_METHODS}
    breakdown['OTHERS'] = []
    return breakdown


def _add(breakdown: Dict[str, Any], label: str, amount: Any, raw_name: Any = None) -> None:
    value = parse_money(amount)
    if value <= 0:
        return
    if label in KNOWN_METHODS:
        breakdown[label] = round2(breakdown[label] + value)
        return
    name = safe_string(raw_name).strip() or 'OTHER'
    breakdown['OTHERS'].append({'name': name, 'amount': value})


def _add_known_keys(breakdown: Dict[str, Any], source: Any) -> float:
    if not isinstance(source, dict):
        return 0.0
    added = 0.0
    for label, keys in aliases.PAYMENT_METHOD_KEYS.items():
        value = resolve_money(source, keys)
        if value > 0:
            _add(breakdown, label, value)
            added += value
    return added


def payment_breakdown(raw: Dict[str, Any], paid_fallback: float) -> Dict[str, Any]:
    """
    Split the paid amount across payment methods.

    Explicit per-method keys win. Otherwise a payments array is bucketed by
    method label, and as a last resort the whole `paid_fallback` goes to the
    order's single payment method.
    """
    breakdown = _empty_breakdown()

    explicit = 0.0
    for source in aliases.PAYMENT_BREAKDOWN_SOURCES:
        explicit += _add_known_keys(breakdown, raw.get(source))
    explicit += _add_known_keys(breakdown, raw)

    payments = raw.get(aliases.PAYMENTS)
    if explicit <= 0 and isinstance(payments, list):
        for payment in payments:
            if not isinstance(payment, dict):
                continue
            method = resolve_string(payment, aliases.PAYMENT_ROW_METHOD)
            _add(breakdown, normalize_method_label(method), payment.get('amount'), method)

    known_total = sum(breakdown[m] for m in KNOWN_METHODS)
    known_total += sum(other['amount'] for other in breakdown['OTHERS'])
    if known_total <= 0:
        method = resolve_string(raw, aliases.ORDER_PAYMENT_METHOD)
        label = normalize_method_label(method)
        if label:
            _add(breakdown, label, paid_fallback, method)

    return breakdown


def detect_vat_rate(raw: Dict[str, Any]) -> float:
    """First positive VAT/tax rate (percent) on the order, else 0."""
    for path in aliases.VAT_RATE:
        rate = to_number(get_path(raw, path))
        if rate > 0:
            return rate
    return 0.0


def infer_inclusive_vat(net_amount: float, vat_rate: float) -> float:
    """VAT contained in a VAT-inclusive amount."""
    if net_amount <= 0 or vat_rate <= 0:
        return 0.0
    return round2(net_amount * vat_rate / (100 + vat_rate))


def effective_vat(raw: Dict[str, Any], receipt: ReceiptOrder) -> float:
    if receipt.totals.tax > 0:
        return receipt.totals.tax
    base = max(0.0, receipt.totals.total - max(0.0, receipt.totals.shipping))
    return infer_inclusive_vat(base, detect_vat_rate(raw))


def receipt_payload(raw_order: Any) -> Dict[str, Any]:
    """Canonical receipt plus payment split and VAT, ready for printing."""
    raw = raw_order if isinstance(raw_order, dict) else {}
    receipt = canonicalize(raw)
    return {
        'receipt': receipt.to_dict(),
        'payments': payment_breakdown(raw, receipt.totals.paid),
        'vat': effective_vat(raw, receipt),
        'vatRate': detect_vat_rate(raw),
    }


def receipt_payload_batch(raw_orders: Any) -> List[Dict[str, Any]]:
    if not isinstance(raw_orders, list):
        return []
    return [receipt_payload(order) for order in raw_orders]
