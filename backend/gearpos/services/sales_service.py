# Overview: Append-only sale history.

from __future__ import annotations

from typing import Iterable

from ..models import Sale
from ..validation import ConflictError, NotFoundError


class SaleHistory:
    """
    Completed sales in the order they were rung up.

    Sales are frozen dataclasses; the history only appends, reads, and (on a
    cloud pull or backup import) gets replaced wholesale.
    """

    def __init__(self, sales: Iterable[Sale] = ()):
        self._sales: list[Sale] = list(sales)

    def __len__(self) -> int:
        return len(self._sales)

    def count(self) -> int:
        return len(self._sales)

    @property
    def sales(self) -> tuple[Sale, ...]:
        return tuple(self._sales)

    def newest_first(self) -> list[Sale]:
        return list(reversed(self._sales))

    def get(self, sale_id: str) -> Sale | None:
        for sale in self._sales:
            if sale.id == sale_id:
                return sale
        return None

    def require(self, sale_id: str) -> Sale:
        sale = self.get(sale_id)
        if sale is None:
            raise NotFoundError(f"Sale {sale_id} not found")
        return sale

    def append(self, sale: Sale) -> None:
        if self.get(sale.id) is not None:
            raise ConflictError(f"Sale {sale.id} already recorded")
        self._sales.append(sale)

    def replace_all(self, sales: Iterable[Sale]) -> None:
        self._sales = list(sales)

    def to_list(self) -> list[dict]:
        return [s.to_dict() for s in self._sales]
