from receipt_norm import payments


def test_method_labels():
    assert payments.normalize_method_label('Cash') == 'CASH'
    assert payments.normalize_method_label('VISA') == 'CARD'
    assert payments.normalize_method_label('MasterCard') == 'CARD'
    assert payments.normalize_method_label('b-Kash') == 'BKASH'
    assert payments.normalize_method_label('Mobile wallet') == 'BKASH'
    assert payments.normalize_method_label('Nagad') == 'NAGAD'
    assert payments.normalize_method_label('Voucher') == ''
    assert payments.normalize_method_label(None) == ''


def test_breakdown_from_payments_array():
    order = {'payments': [
        {'method': 'Cash', 'amount': 500},
        {'payment_method': 'VISA card', 'amount': '1,000'},
        {'method': 'bKash', 'amount': 200},
        {'method': 'Voucher', 'amount': 50},
        {'method': 'Cash', 'amount': 0},
    ]}

    breakdown = payments.payment_breakdown(order, 0)
    assert breakdown == {
        'CASH': 500.0,
        'CARD': 1000.0,
        'BKASH': 200.0,
        'NAGAD': 0.0,
        'OTHERS': [{'name': 'Voucher', 'amount': 50.0}],
    }


def test_explicit_keys_win_over_payments_array():
    order = {
        'payment_breakdown': {'cash': 300, 'card_paid': '200'},
        'payments': [{'method': 'cash', 'amount': 999}],
    }

    breakdown = payments.payment_breakdown(order, 0)
    assert breakdown['CASH'] == 300
    assert breakdown['CARD'] == 200


def test_single_method_receives_paid_amount():
    breakdown = payments.payment_breakdown({'payment_method': 'Nagad'}, 750)
    assert breakdown['NAGAD'] == 750
    assert breakdown['OTHERS'] == []


def test_unknown_single_method_is_ignored():
    breakdown = payments.payment_breakdown({'payment_method': 'Cheque'}, 750)
    assert sum(breakdown[m] for m in payments.KNOWN_METHODS) == 0
    assert breakdown['OTHERS'] == []


def test_detect_vat_rate():
    assert payments.detect_vat_rate({'vat_rate': '7.5'}) == 7.5
    assert payments.detect_vat_rate({'amounts': {'vatRate': 5}}) == 5
    assert payments.detect_vat_rate({'vat_rate': 0, 'taxRate': 15}) == 15
    assert payments.detect_vat_rate({}) == 0


def test_infer_inclusive_vat():
    assert payments.infer_inclusive_vat(1050, 5) == 50.0
    assert payments.infer_inclusive_vat(0, 5) == 0
    assert payments.infer_inclusive_vat(1050, 0) == 0


def test_receipt_payload_infers_vat_and_payment():
    payload = payments.receipt_payload({
        'order_no': 'POS-1',
        'total_amount': 1110,
        'shipping_amount': 60,
        'vat_rate': 5,
        'payment_method': 'cash',
        'paid_amount': 1110,
    })

    assert payload['receipt']['orderNo'] == 'POS-1'
    assert payload['vat'] == 50.0
    assert payload['vatRate'] == 5
    assert payload['payments']['CASH'] == 1110


def test_receipt_payload_prefers_explicit_tax():
    payload = payments.receipt_payload({'total_amount': 1000, 'vat_amount': 30, 'vat_rate': 5})
    assert payload['vat'] == 30


def test_receipt_payload_batch():
    assert len(payments.receipt_payload_batch([{}, {'order_no': 'X'}])) == 2
    assert payments.receipt_payload_batch(None) == []
