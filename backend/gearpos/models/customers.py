from __future__ import annotations

from dataclasses import dataclass

from ..coerce import as_str


@dataclass
class Customer:
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
    def from_dict(cls, data: dict) -> "Customer":
        return cls(
            id=str(data["id"]),
            name=as_str(data, "name"),
            phone=as_str(data, "phone"),
            email=as_str(data, "email"),
            notes=as_str(data, "notes"),
        )
