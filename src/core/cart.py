from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from core.models import CartLine, Product
from utils.logger import get_logger

_logger = get_logger(__name__)

ProductLookup = Callable[[str], Optional[Product]]
CartListener = Callable[["CartStore"], None]


class CartStore:
    """
    In-memory cart: product id -> CartLine.

    Every line has quantity >= 1; a line that would drop to zero is deleted.
    Products are looked up in the latest catalog snapshot through `lookup`.
    Listeners run synchronously after every mutation that changed the cart.
    """

    def __init__(self, lookup: ProductLookup) -> None:
        self._lookup = lookup
        self._lines: Dict[str, CartLine] = {}
        self._listeners: List[CartListener] = []

    def on_change(self, listener: CartListener) -> None:
        self._listeners.append(listener)

    def add_item(self, product_id: str) -> None:
        product = self._lookup(product_id)
        if product is None:
            # catalog refreshed under the user's click
            _logger.debug(f"add_item: {product_id} not in catalog, ignored")
            return

        line = self._lines.get(product_id)
        if line:
            self._lines[product_id] = line.with_quantity(line.quantity + 1)
        else:
            self._lines[product_id] = CartLine.from_product(product)
        self._changed()

    def change_quantity(self, product_id: str, delta: int) -> None:
        line = self._lines.get(product_id)
        if line is None:
            return

        quantity = line.quantity + delta
        if quantity <= 0:
            del self._lines[product_id]
        else:
            self._lines[product_id] = line.with_quantity(quantity)
        self._changed()

    def remove_item(self, product_id: str) -> None:
        if self._lines.pop(product_id, None) is not None:
            self._changed()

    def clear(self) -> None:
        self._lines = {}
        self._changed()

    def total(self) -> float:
        return sum(line.line_total for line in self._lines.values())

    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def lines(self) -> Tuple[CartLine, ...]:
        return tuple(self._lines.values())

    def get(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._lines

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)
