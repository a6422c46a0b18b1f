# Overview: Customer directory (create/edit/lookup; no deletes).

from __future__ import annotations

import uuid
from typing import Iterable

from ..models import Customer, CustomerSnapshot
from ..validation import NotFoundError, ValidationError, optional_text, require_text

CUSTOMER_MUTABLE_FIELDS = {"name", "phone", "email", "notes"}


class CustomerDirectory:
    def __init__(self, customers: Iterable[Customer] = ()):
        self._customers: list[Customer] = list(customers)

    @property
    def customers(self) -> list[Customer]:
        return list(self._customers)

    def __len__(self) -> int:
        return len(self._customers)

    def get(self, customer_id: str) -> Customer | None:
        for customer in self._customers:
            if customer.id == customer_id:
                return customer
        return None

    def require(self, customer_id: str) -> Customer:
        customer = self.get(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found")
        return customer

    def create(self, payload: dict) -> Customer:
        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON payload")
        customer = Customer(
            id=str(uuid.uuid4()),
            name=require_text(payload, "name", "Customer name"),
            phone=optional_text(payload, "phone"),
            email=optional_text(payload, "email"),
            notes=optional_text(payload, "notes"),
        )
        self._customers.insert(0, customer)
        return customer

    def update(self, customer_id: str, patch: dict) -> Customer:
        customer = self.require(customer_id)
        if not isinstance(patch, dict):
            raise ValidationError("Invalid JSON payload")
        for key in patch:
            if key not in CUSTOMER_MUTABLE_FIELDS:
                raise ValidationError(f"Field not allowed: {key}")
        name = require_text(patch, "name", "Customer name") if "name" in patch else customer.name

        customer.name = name
        for key in ("phone", "email", "notes"):
            if key in patch:
                setattr(customer, key, optional_text(patch, key))
        return customer

    def snapshot(self, customer_id: str) -> CustomerSnapshot:
        """Freeze the customer's current fields for embedding in a sale."""
        customer = self.require(customer_id)
        return CustomerSnapshot(
            id=customer.id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            notes=customer.notes,
        )

    def replace_all(self, customers: Iterable[Customer]) -> None:
        self._customers = list(customers)

    def to_list(self) -> list[dict]:
        return [c.to_dict() for c in self._customers]
