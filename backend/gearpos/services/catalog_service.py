# Overview: In-memory catalog store (products owning size/color variants).

"""
Catalog invariants:
- Product SKU is unique across the store (compared case-insensitively).
- Variant stock is a non-negative integer at all times.
- A product's size/color pairs are unique, so composite SKUs
  ("{sku}-{size}-{color}") resolve to exactly one variant.
- Products and variants are never deleted here; stock is mutated in place.
"""
from __future__ import annotations

import uuid
from typing import Iterable, Iterator

from ..models import Product, Variant
from ..validation import (
    ConflictError,
    NotFoundError,
    ValidationError,
    coerce_number,
    coerce_optional_number,
    coerce_stock,
    optional_text,
    require_text,
)

PRODUCT_MUTABLE_FIELDS = {"name", "sku", "category", "cost", "price", "notes", "imageUrl"}
VARIANT_MUTABLE_FIELDS = {"size", "color", "stock", "price"}


def _new_id() -> str:
    return str(uuid.uuid4())


def _sku_key(value: str) -> str:
    return value.strip().casefold()


class CatalogStore:
    def __init__(self, products: Iterable[Product] = ()):
        self._products: list[Product] = list(products)

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    def __len__(self) -> int:
        return len(self._products)

    def get(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def require(self, product_id: str) -> Product:
        product = self.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def find_variant(self, product_id: str, variant_id: str) -> tuple[Product, Variant] | None:
        product = self.get(product_id)
        if product is None:
            return None
        variant = product.find_variant(variant_id)
        if variant is None:
            return None
        return product, variant

    def iter_variants(self) -> Iterator[tuple[Product, Variant]]:
        for product in self._products:
            for variant in product.variants:
                yield product, variant

    def find_by_sku(self, sku: str) -> Product | None:
        key = _sku_key(sku)
        for product in self._products:
            if _sku_key(product.sku) == key:
                return product
        return None

    def resolve_sku(self, code: str) -> tuple[Product, Variant | None]:
        """
        Resolve a scanned/typed code to a product and optional variant.

        Accepts a bare product SKU or a composite "{sku}-{size}-{color}".
        A bare SKU on a product with variants resolves to its first variant;
        so does a partial composite (size or color only) that matches more
        than one variant.
        """
        code = (code or "").strip()
        if not code:
            raise NotFoundError("SKU is required")
        key = _sku_key(code)

        product = self.find_by_sku(code)
        if product is not None:
            return product, (product.variants[0] if product.variants else None)

        for product, variant in self.iter_variants():
            if _sku_key(variant.display_sku(product)) == key:
                return product, variant

        for product in self._products:
            prefix = _sku_key(product.sku) + "-"
            if not product.variants or not key.startswith(prefix):
                continue
            rest = key[len(prefix):]
            matches = [
                v for v in product.variants
                if rest in (_sku_key(v.size), _sku_key(v.color), _sku_key(f"{v.size}-{v.color}"))
            ]
            if len(matches) == 1:
                return product, matches[0]
            if matches:
                return product, product.variants[0]

        raise NotFoundError(f"No product or variant matches SKU '{code}'")

    def _ensure_unique_sku(self, sku: str, *, exclude_id: str | None = None) -> None:
        existing = self.find_by_sku(sku)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError(f"SKU '{sku}' already exists")

    def _build_variant(self, payload: dict) -> Variant:
        if not isinstance(payload, dict):
            raise ValidationError("variant must be an object")
        return Variant(
            id=str(payload.get("id") or _new_id()),
            size=optional_text(payload, "size"),
            color=optional_text(payload, "color"),
            stock=coerce_stock(payload.get("stock")),
            price=coerce_optional_number(payload.get("price"), "variant price"),
        )

    def _ensure_unique_variant_id(self, variant: Variant, pending: Iterable[Variant] = ()) -> None:
        # Unique across the whole catalog: product_variants rows are upserted by id
        taken = {v.id for _, v in self.iter_variants()}
        taken.update(v.id for v in pending)
        if variant.id in taken:
            raise ConflictError(f"Variant id {variant.id} already exists")

    @staticmethod
    def _ensure_unique_combo(product: Product, variant: Variant) -> None:
        for other in product.variants:
            if other.id == variant.id:
                continue
            if (_sku_key(other.size), _sku_key(other.color)) == (_sku_key(variant.size), _sku_key(variant.color)):
                raise ConflictError(
                    f"{product.name} already has a {variant.size}/{variant.color} variant"
                )

    def create_product(self, payload: dict) -> Product:
        """
        Create a product (and its initial variants) from an API/form payload.

        Nothing is added to the store unless the whole payload validates.
        """
        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON payload")
        name = require_text(payload, "name", "Name")
        sku = require_text(payload, "sku", "SKU")
        self._ensure_unique_sku(sku)

        raw_variants = payload.get("variants") or []
        if not isinstance(raw_variants, list):
            raise ValidationError("variants must be a list")

        product = Product(
            id=_new_id(),
            name=name,
            sku=sku,
            category=optional_text(payload, "category") or "general",
            cost=coerce_number(payload.get("cost"), "cost"),
            price=coerce_number(payload.get("price"), "price"),
            notes=optional_text(payload, "notes"),
            image_url=optional_text(payload, "imageUrl"),
        )
        for raw in raw_variants:
            variant = self._build_variant(raw)
            self._ensure_unique_variant_id(variant, product.variants)
            self._ensure_unique_combo(product, variant)
            product.variants.append(variant)

        self._products.insert(0, product)
        return product

    def update_product(self, product_id: str, patch: dict) -> Product:
        product = self.require(product_id)
        if not isinstance(patch, dict):
            raise ValidationError("Invalid JSON payload")
        for key in patch:
            if key not in PRODUCT_MUTABLE_FIELDS:
                raise ValidationError(f"Field not allowed: {key}")

        # Validate everything first so a bad field leaves the product untouched
        changes: dict = {}
        if "name" in patch:
            changes["name"] = require_text(patch, "name", "Name")
        if "sku" in patch:
            sku = require_text(patch, "sku", "SKU")
            self._ensure_unique_sku(sku, exclude_id=product.id)
            changes["sku"] = sku
        if "category" in patch:
            changes["category"] = optional_text(patch, "category") or "general"
        if "cost" in patch:
            changes["cost"] = coerce_number(patch["cost"], "cost")
        if "price" in patch:
            changes["price"] = coerce_number(patch["price"], "price")
        if "notes" in patch:
            changes["notes"] = optional_text(patch, "notes")
        if "imageUrl" in patch:
            changes["image_url"] = optional_text(patch, "imageUrl")

        for attr, value in changes.items():
            setattr(product, attr, value)
        return product

    def add_variant(self, product_id: str, payload: dict) -> Variant:
        product = self.require(product_id)
        variant = self._build_variant(payload)
        self._ensure_unique_variant_id(variant)
        self._ensure_unique_combo(product, variant)
        product.variants.append(variant)
        return variant

    def update_variant(self, product_id: str, variant_id: str, patch: dict) -> Variant:
        """Edit a variant (restock, relabel, change or clear the price override)."""
        product = self.require(product_id)
        variant = product.find_variant(variant_id)
        if variant is None:
            raise NotFoundError(f"Variant {variant_id} not found")
        if not isinstance(patch, dict):
            raise ValidationError("Invalid JSON payload")
        for key in patch:
            if key not in VARIANT_MUTABLE_FIELDS:
                raise ValidationError(f"Field not allowed: {key}")

        candidate = Variant(
            id=variant.id,
            size=optional_text(patch, "size") if "size" in patch else variant.size,
            color=optional_text(patch, "color") if "color" in patch else variant.color,
            stock=coerce_stock(patch["stock"]) if "stock" in patch else variant.stock,
            price=coerce_optional_number(patch["price"], "variant price") if "price" in patch else variant.price,
        )
        self._ensure_unique_combo(product, candidate)

        variant.size = candidate.size
        variant.color = candidate.color
        variant.stock = candidate.stock
        variant.price = candidate.price
        return variant

    def replace_all(self, products: Iterable[Product]) -> None:
        self._products = list(products)

    def to_list(self) -> list[dict]:
        return [p.to_dict() for p in self._products]
