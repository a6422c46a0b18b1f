from __future__ import annotations

from dataclasses import dataclass, field

from ..coerce import as_float, as_int, as_optional_float, as_str


@dataclass
class Variant:
    """
    A size/color combination of a product with its own stock count.

    Stock is mutated in place by checkout and restocks; it must never go
    below zero.
    """
    id: str
    size: str = ""
    color: str = ""
    stock: int = 0
    price: float | None = None  # optional override of the product price

    def effective_price(self, product: "Product") -> float:
        return self.price if self.price is not None else product.price

    def display_sku(self, product: "Product") -> str:
        return f"{product.sku}-{self.size}-{self.color}"

    def label(self) -> str:
        return f"{self.size}/{self.color}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "size": self.size,
            "color": self.color,
            "stock": self.stock,
            "price": self.price,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Variant":
        return cls(
            id=str(data["id"]),
            size=as_str(data, "size"),
            color=as_str(data, "color"),
            stock=max(0, as_int(data, "stock")),
            price=as_optional_float(data, "price"),
        )


@dataclass
class Product:
    """Catalog entry; an empty ``variants`` list means a single implicit unit."""
    id: str
    name: str
    sku: str
    category: str = "general"
    cost: float = 0.0
    price: float = 0.0
    notes: str = ""
    image_url: str = ""
    variants: list[Variant] = field(default_factory=list)

    def find_variant(self, variant_id: str | None) -> Variant | None:
        if variant_id is None:
            return None
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "category": self.category,
            "cost": self.cost,
            "price": self.price,
            "notes": self.notes,
            "imageUrl": self.image_url,
            "variants": [v.to_dict() for v in self.variants],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        variants = data.get("variants") or []
        if not isinstance(variants, list):
            raise ValueError("variants must be a list")
        return cls(
            id=str(data["id"]),
            name=as_str(data, "name"),
            sku=as_str(data, "sku"),
            category=as_str(data, "category"),
            cost=as_float(data, "cost"),
            price=as_float(data, "price"),
            notes=as_str(data, "notes"),
            image_url=as_str(data, "imageUrl"),
            variants=[Variant.from_dict(v) for v in variants],
        )
