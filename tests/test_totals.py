from receipt_norm.items import extract_items
from receipt_norm.totals import change_from_notes, payments_sum, reconcile_totals


def _totals(order):
    return reconcile_totals(order, extract_items(order), notes=order.get('notes'))


def test_explicit_total_wins_over_derived():
    totals = _totals({
        'subtotal': 500,
        'discount': 50,
        'tax': 10,
        'shipping': 60,
        'total_amount': 999,
    })
    assert totals.total == 999
    assert totals.subtotal == 500
    assert totals.discount == 50
    assert totals.tax == 10


def test_totals_derived_from_items():
    totals = _totals({
        'items': [
            {'name': 'A', 'quantity': 2, 'price': 100},
            {'name': 'B', 'quantity': 1, 'price': 50.5},
        ],
        'vat': 15,
        'shipping_amount': '৳60',
    })

    assert totals.subtotal == 250.5
    assert totals.discount == 0
    assert totals.tax == 15
    assert totals.shipping == 60
    assert totals.total == 325.5
    assert totals.paid == 0
    assert totals.due == 325.5
    assert totals.change == 0


def test_discount_falls_back_to_item_discounts():
    totals = _totals({'items': [
        {'name': 'A', 'quantity': 1, 'price': 100, 'discount': 10},
        {'name': 'B', 'quantity': 1, 'price': 100, 'discount_amount': '5.50'},
    ]})
    assert totals.discount == 15.5


def test_change_is_max_of_overpay_and_notes():
    totals = _totals({'total_amount': 850, 'paid_amount': 1000, 'notes': 'Change given: ৳100'})
    assert totals.change == 150
    assert totals.due == 0
    assert totals.paid == 1000


def test_change_from_notes_can_dominate():
    totals = _totals({'total_amount': 850, 'paid_amount': 900, 'notes': 'change: 100'})
    assert totals.change == 100


def test_explicit_change_field():
    totals = _totals({'total_amount': 500, 'paid_amount': 500, 'change_amount': '৳200'})
    assert totals.change == 200


def test_paid_from_payments_array():
    totals = _totals({'total_amount': 500, 'payments': [{'amount': '300'}, {'amount': 200.5}, 'junk']})
    assert totals.paid == 500.5
    assert totals.change == 0.5
    assert totals.due == 0


def test_paid_and_due_from_payments_object():
    totals = _totals({'total_amount': 500, 'payments': {'paid': 400, 'due': 100}})
    assert totals.paid == 400
    assert totals.due == 100


def test_due_derived_from_total_and_paid():
    totals = _totals({'amounts': {'total': 1200, 'paid': 200}})
    assert totals.due == 1000


def test_negative_upstream_figures_are_not_used():
    totals = _totals({'subtotal': -20, 'total_amount': -5, 'tax': -3})
    assert totals.subtotal == 0
    assert totals.total == 0
    assert totals.tax == 0


def test_change_from_notes_patterns():
    assert change_from_notes('Change given: ৳100') == 100
    assert change_from_notes('CHANGE AMOUNT - Tk. 1,250.75') == 1250.75
    assert change_from_notes('change bdt 40') == 40
    assert change_from_notes('no change here') == 0
    assert change_from_notes('') == 0
    assert change_from_notes(None) == 0


def test_payments_sum_without_array():
    assert payments_sum({}) == 0
    assert payments_sum({'payments': {'paid': 10}}) == 0


def test_exchange_in_notes_is_not_change():
    assert change_from_notes('Exchange 2 items, paid 1000') == 0

    totals = _totals({'total_amount': 850, 'paid_amount': 850, 'notes': 'Exchange 2 items'})
    assert totals.change == 0


def test_huge_payments_sum():
    totals = _totals({'payments': [{'amount': 1e30}]})
    assert totals.paid == 1e30
