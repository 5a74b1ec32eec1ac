from receipt_norm.header import assemble_address_lines, resolve_header


def test_address_lines_ordered_and_deduplicated():
    order = {
        'deliveryAddress': {
            'address': 'House 12, Road 5',
            'area': 'Dhanmondi',
            'zone': 'Zone A',
            'city': 'Dhaka',
            'district': 'Dhaka',
            'division': 'Dhaka',
            'postalCode': '1209',
        },
        'shipping_address': {
            'address': 'House 12, Road 5',
            'city': 'Dhaka',
            'district': 'Dhaka',
            'postal_code': '1209',
        },
        'customer': {'address': 'House 12, Road 5'},
    }

    assert assemble_address_lines(order) == [
        'House 12, Road 5',
        'Dhanmondi, Zone A',
        'Dhaka, Dhaka',
        'Dhaka - 1209',
        '1209',
    ]


def test_address_dedup_is_case_sensitive():
    order = {
        'shippingAddress': {'address': 'House 12, Road 5'},
        'customer': {'address': 'house 12, road 5'},
    }
    assert assemble_address_lines(order) == ['House 12, Road 5', 'house 12, road 5']


def test_address_ignores_non_object_sub_addresses():
    order = {'shipping_address': 'Road 3', 'customer_address': '  Mirpur 10  '}
    assert assemble_address_lines(order) == ['Mirpur 10']


def test_header_identity_fallbacks():
    header = resolve_header({'id': 42})
    assert header['id'] == 42
    assert header['order_no'] == '42'

    header = resolve_header({'order_id': 'A-7', 'orderNumber': 'SC-7'})
    assert header['id'] == 'A-7'
    assert header['order_no'] == 'SC-7'


def test_header_people_and_store():
    header = resolve_header({
        'store': {'name': 'Gulshan Outlet'},
        'salesman': {'name': 'Karim'},
        'customerName': 'Nasrin',
        'mobileNo': '01711000000',
        'notes': 'Gift wrap',
    })
    assert header['store_name'] == 'Gulshan Outlet'
    assert header['sales_by'] == 'Karim'
    assert header['customer_name'] == 'Nasrin'
    assert header['customer_phone'] == '01711000000'
    assert header['notes'] == 'Gift wrap'


def test_header_missing_fields_are_none():
    header = resolve_header({'store': {'id': 3}})
    assert header['store_name'] is None
    assert header['customer_name'] is None
    assert header['customer_address_lines'] == ()
    assert header['id'] == ''
    assert header['order_no'] == ''
