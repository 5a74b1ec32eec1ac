"""
Alias tables for every canonical receipt field.

Each table is an ordered tuple of candidate paths, evaluated first-match-wins.
Dotted paths walk nested objects ("customer.name"). The three upstream order
shapes (social-commerce UI order, POS order, backend API order) all resolve
through these tables.
"""

import re


# 1. ORDER IDENTITY
# Backend: id / order_number, UI: orderNumber, POS: order_no
ORDER_ID = ('id', 'order_id')
ORDER_NO = ('order_number', 'orderNumber', 'order_no')
ORDER_DATE = ('order_date', 'created_at', 'createdAt', 'date')


# 2. PEOPLE AND PLACE
STORE_NAME = ('store.name', 'store', 'storeName', 'store_name')
SALES_BY = ('salesBy', 'sales_by', 'salesman.name', 'created_by.name')
CUSTOMER_NAME = ('customer.name', 'customerName', 'customer_name')
CUSTOMER_PHONE = ('customer.phone', 'mobileNo', 'customer_phone')
NOTES = ('notes', 'note')


# 3. ADDRESSES
# Sub-objects are checked in this order; each contributes street, area/zone,
# city/district and division/postal lines.
DELIVERY_ADDRESS = ('deliveryAddress', 'delivery_address')
SHIPPING_ADDRESS = ('shipping_address', 'shippingAddress')
CUSTOMER_ADDRESS = ('customer.address', 'customer_address')

ADDRESS_COMPONENTS = (
    # (parts, separator); each part is its own alias tuple
    ((('address', 'street'),), ''),
    ((('area',), ('zone',)), ', '),
    ((('city',), ('district',)), ', '),
    ((('division',), ('postalCode', 'postal_code')), ' - '),
)


# 4. LINE ITEM COLLECTIONS
# Each entry is a group; the first present list in a group is used.
PRODUCT_COLLECTIONS = ('products',)
ITEM_COLLECTIONS = ('items', 'lines', 'order_items')
SERVICE_COLLECTIONS = ('services', 'service_items', 'order_services', 'orderServices', 'serviceItems')


# 5. LINE ITEM FIELDS
ITEM_QTY = ('quantity', 'qty')
ITEM_UNIT_PRICE = ('unit_price', 'price', 'unitPrice', 'base_price')
ITEM_DISCOUNT = ('discount_amount', 'discount')
ITEM_TOTAL = ('total_amount', 'amount', 'lineTotal', 'line_total')
ITEM_BARCODES = ('barcodes',)
ITEM_BARCODE = ('barcode',)

PRODUCT_NAME = ('product_name', 'productName', 'name', 'product.name')
PRODUCT_VARIANT = ('size', 'variant', 'color')
SERVICE_NAME = ('service_name', 'name', 'service.name', 'product_name')
SERVICE_VARIANT = ('category', 'service_category', 'service.category')

DEFAULT_PRODUCT_NAME = 'Item'
DEFAULT_SERVICE_NAME = 'Service'

SERVICE_MARKERS = ('service_id', 'serviceId', 'is_service', 'isService')
ITEM_TYPE = ('item_type', 'type')

# Stable row identifiers, in priority order
ROW_ID = ('id', 'order_item_id', 'order_service_id', 'orderServiceId', 'line_id', 'pivot.id')
ROW_BATCH = ('batch_id', 'batchId', 'batch.id', 'batch_number')
ROW_SKU = ('sku', 'product_sku', 'product.sku')


# 6. TOTALS
SUBTOTAL = ('amounts.subtotal', 'subtotal_amount', 'subtotal', 'subtotal_including_tax')
DISCOUNT = ('amounts.totalDiscount', 'discount_amount', 'discount', 'total_discount')
TAX = ('amounts.vat', 'amounts.tax', 'tax_amount', 'vat_amount', 'vat', 'tax')
SHIPPING = ('amounts.transportCost', 'amounts.shipping', 'shipping_amount', 'shipping')
TOTAL = ('amounts.total', 'total_amount', 'grand_total')
PAID = ('payments.paid', 'payments.totalPaid', 'paid_amount', 'amounts.paid')
DUE = ('payments.due', 'outstanding_amount', 'amounts.due')
CHANGE = ('change_amount', 'changeAmount', 'change')
PAYMENTS = 'payments'

TOTALS_FIELDS = {
    'subtotal': SUBTOTAL,
    'discount': DISCOUNT,
    'tax': TAX,
    'shipping': SHIPPING,
    'total': TOTAL,
    'paid': PAID,
    'due': DUE,
    'change': CHANGE,
}


# 7. CHANGE IN FREE-TEXT NOTES
# Handles: "Change: 100", "Change given: ৳100", "change amount - Tk. 50.25", "Change BDT 1,200"
CHANGE_NOTE_PATTERN = re.compile(
    r'\bchange\b\s*(?:given|amount)?\s*[:\-]?\s*(?:৳|tk\.?|bdt)?\s*(?P<amount>[0-9][0-9,]*(?:\.[0-9]+)?)',
    re.IGNORECASE
)


# 8. PAYMENT METHODS AND VAT RATE
PAYMENT_BREAKDOWN_SOURCES = ('payment_breakdown', 'payments_breakdown', 'paymentInfo', 'payment')
PAYMENT_METHOD_KEYS = {
    'CASH': ('cash', 'cash_paid', 'cashPaid'),
    'CARD': ('card', 'card_paid', 'cardPaid'),
    'BKASH': ('bkash', 'bkash_paid', 'bkashPaid'),
    'NAGAD': ('nagad', 'nagad_paid', 'nagadPaid'),
}
PAYMENT_ROW_METHOD = ('payment_method', 'payment_method_name', 'method', 'name', 'type', 'channel')
ORDER_PAYMENT_METHOD = ('payment_method', 'paymentMethod', 'payments.method', 'payment.method')
VAT_RATE = ('amounts.vatRate', 'vat_rate', 'vatRate', 'tax_rate', 'taxRate', 'amounts.taxRate')
