from __future__ import annotations

from dataclasses import dataclass

from ..coerce import as_float, as_int, as_optional_str, as_str


@dataclass
class CartLine:
    """
    Staged line on the open cart.

    Holds ids rather than Product/Variant objects; the catalog owns those.
    ``unit_price`` is captured when the line is added so a price edit in the
    catalog does not reprice a sale that is already being rung up.
    """
    id: str
    product_id: str
    variant_id: str | None
    quantity: int
    unit_price: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "variantId": self.variant_id,
            "qty": self.quantity,
            "price": self.unit_price,
        }


@dataclass(frozen=True)
class SaleItem:
    id: str
    product_id: str
    variant_id: str | None
    sku: str
    name: str
    size: str
    color: str
    qty: int
    price: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "variantId": self.variant_id,
            "sku": self.sku,
            "name": self.name,
            "size": self.size,
            "color": self.color,
            "qty": self.qty,
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SaleItem":
        return cls(
            id=str(data["id"]),
            product_id=as_str(data, "productId"),
            variant_id=as_optional_str(data, "variantId"),
            sku=as_str(data, "sku"),
            name=as_str(data, "name"),
            size=as_str(data, "size"),
            color=as_str(data, "color"),
            qty=as_int(data, "qty"),
            price=as_float(data, "price"),
        )


@dataclass(frozen=True)
class CustomerSnapshot:
    """Customer fields frozen into a sale; later customer edits never reach it."""
    id: str
    name: str
    phone: str = ""
    email: str = ""
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "CustomerSnapshot | None":
        if not data:
            return None
        if not isinstance(data, dict):
            raise ValueError("customer snapshot must be an object")
        return cls(
            id=as_str(data, "id"),
            name=as_str(data, "name"),
            phone=as_str(data, "phone"),
            email=as_str(data, "email"),
            notes=as_str(data, "notes"),
        )


@dataclass(frozen=True)
class Sale:
    """
    Completed sale. Immutable once created; history is append-only.

    ``total`` is always recomputable from ``items``, ``discount`` and
    ``tax_rate`` through pricing_service.compute_totals.
    """
    id: str
    created_at: str
    items: tuple[SaleItem, ...]
    subtotal: float
    discount: float
    tax_rate: float
    tax_amount: float
    total: float
    payment_method: str
    customer_id: str | None = None
    customer_snapshot: CustomerSnapshot | None = None
    notes: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "subtotal": self.subtotal,
            "discount": self.discount,
            "taxRate": self.tax_rate,
            "taxAmount": self.tax_amount,
            "total": self.total,
            "paymentMethod": self.payment_method,
            "customerId": self.customer_id,
            "customerSnapshot": self.customer_snapshot.to_dict() if self.customer_snapshot else None,
            "notes": self.notes,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Sale":
        items = data.get("items") or []
        if not isinstance(items, list):
            raise ValueError("items must be a list")
        return cls(
            id=str(data["id"]),
            created_at=as_str(data, "createdAt"),
            items=tuple(SaleItem.from_dict(i) for i in items),
            subtotal=as_float(data, "subtotal"),
            discount=as_float(data, "discount"),
            tax_rate=as_float(data, "taxRate"),
            tax_amount=as_float(data, "taxAmount"),
            total=as_float(data, "total"),
            payment_method=as_str(data, "paymentMethod"),
            customer_id=as_optional_str(data, "customerId"),
            customer_snapshot=CustomerSnapshot.from_dict(data.get("customerSnapshot")),
            notes=as_str(data, "notes"),
        )
