"""Value objects for the canonical, print-ready receipt."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


@dataclass(frozen=True)
class ReceiptItem:
    """One printable line. `line_total` is what totals sum; qty x unit_price is advisory."""

    name: str
    qty: float
    unit_price: float
    line_total: float
    variant: Optional[str] = None
    discount: float = 0.0
    barcodes: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'variant': self.variant,
            'qty': self.qty,
            'unitPrice': self.unit_price,
            'lineTotal': self.line_total,
            'discount': self.discount,
            'barcodes': list(self.barcodes) if self.barcodes is not None else None,
        }


@dataclass(frozen=True)
class ReceiptTotals:
    subtotal: float = 0.0
    discount: float = 0.0
    tax: float = 0.0
    shipping: float = 0.0
    total: float = 0.0
    paid: float = 0.0
    due: float = 0.0
    change: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            'subtotal': self.subtotal,
            'discount': self.discount,
            'tax': self.tax,
            'shipping': self.shipping,
            'total': self.total,
            'paid': self.paid,
            'due': self.due,
            'change': self.change,
        }


@dataclass(frozen=True)
class ReceiptOrder:
    """
    Canonical receipt produced by `canonicalize`.

    Created fresh per call and never mutated; the caller owns it.
    """

    id: Union[int, str]
    order_no: str
    date_time: str
    items: Tuple[ReceiptItem, ...] = ()
    totals: ReceiptTotals = field(default_factory=ReceiptTotals)
    store_name: Optional[str] = None
    sales_by: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address_lines: Tuple[str, ...] = ()
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Camel-cased shape consumed by the printing and PDF collaborators."""
        return {
            'id': self.id,
            'orderNo': self.order_no,
            'dateTime': self.date_time,
            'storeName': self.store_name,
            'salesBy': self.sales_by,
            'customerName': self.customer_name,
            'customerPhone': self.customer_phone,
            'customerAddressLines': list(self.customer_address_lines),
            'items': [item.to_dict() for item in self.items],
            'totals': self.totals.to_dict(),
            'notes': self.notes,
        }
