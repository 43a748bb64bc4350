# frontend/cart.py
import json
import logging
from typing import List, Optional

log = logging.getLogger(__name__)


class StockError(Exception):
    def __init__(self, stock: int):
        self.stock = stock
        super().__init__(f"Only {stock} left in stock.")


class Cart:
    """Cart kept in the browser session; items are product dicts plus 'quantity'."""

    def __init__(self, items: Optional[List[dict]] = None):
        self.items: List[dict] = list(items or [])

    def _find(self, product_id: str) -> Optional[dict]:
        for item in self.items:
            if item["id"] == product_id:
                return item
        return None

    def add(self, product: dict, quantity: int = 1) -> None:
        stock = int(product.get("stock") or 0)
        existing = self._find(product["id"])
        new_quantity = (existing["quantity"] if existing else 0) + quantity
        if new_quantity > stock:
            raise StockError(stock)
        if existing:
            existing["quantity"] = new_quantity
        else:
            self.items.append({**product, "quantity": quantity})

    def remove(self, product_id: str) -> None:
        self.items = [item for item in self.items if item["id"] != product_id]

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        item = self._find(product_id)
        if item is None:
            return
        stock = int(item.get("stock") or 0)
        if quantity > stock:
            raise StockError(stock)
        item["quantity"] = quantity

    def clear(self) -> None:
        self.items = []

    @property
    def count(self) -> int:
        return sum(item["quantity"] for item in self.items)

    @property
    def total(self) -> float:
        return sum(float(item["price"]) * item["quantity"] for item in self.items)

    def dumps(self) -> str:
        return json.dumps(self.items)

    @classmethod
    def loads(cls, raw: Optional[str]) -> "Cart":
        if not raw:
            return cls()
        try:
            items = json.loads(raw)
            if not isinstance(items, list):
                raise ValueError("cart payload is not a list")
            return cls([i for i in items if isinstance(i, dict) and "id" in i and "quantity" in i])
        except ValueError as e:
            log.warning("Failed to parse stored cart, starting empty: %s", e)
            return cls()
