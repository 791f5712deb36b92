"""
Local mirrors of remote collections.

A mirror consumes a subscription handle, an async iterable of SnapshotEvent,
and replaces its whole contents with every snapshot that arrives. Rendering
only ever sees the latest full list.
"""

from __future__ import annotations

from typing import AsyncIterable, Callable, Generic, List, Optional, TypeVar

from core.errors import SubscriptionError
from core.models import Order, Product
from docstore.models import DocumentSnapshot, Snapshot, SnapshotEvent
from utils.logger import get_logger

_logger = get_logger(__name__)

T = TypeVar("T")


class RemoteMirror(Generic[T]):
    name = "collection"

    def __init__(
        self,
        on_render: Optional[Callable[[List[T]], None]] = None,
        on_error: Optional[Callable[[SubscriptionError], None]] = None,
    ) -> None:
        self.items: List[T] = []
        self.error: Optional[SubscriptionError] = None
        self.loaded = False
        self._on_render = on_render
        self._on_error = on_error

    def materialize_document(self, doc: DocumentSnapshot) -> T:
        raise NotImplementedError

    def materialize(self, snapshot: Snapshot) -> List[T]:
        items = []
        for doc in snapshot:
            try:
                items.append(self.materialize_document(doc))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                _logger.warning(f"Skipping malformed {self.name} document {doc.id}: {exc}")
        return items

    def apply(self, event: SnapshotEvent) -> None:
        """Apply one delivery: replace the contents, or record the error."""
        if event.error is not None:
            error = event.error
            if not isinstance(error, SubscriptionError):
                error = SubscriptionError(str(error))
            _logger.error(f"Error fetching {self.name}: {error}")
            self.error = error
            if self._on_error:
                self._on_error(error)
            return

        self.items = self.materialize(event.snapshot)
        self.error = None
        self.loaded = True
        _logger.debug(f"{self.name}: snapshot of {len(self.items)}")
        if self._on_render:
            self._on_render(self.items)

    async def run(self, subscription: AsyncIterable[SnapshotEvent]) -> None:
        """Consume the feed until it ends; deliveries are applied in order."""
        async for event in subscription:
            self.apply(event)


class CatalogMirror(RemoteMirror[Product]):
    name = "products"

    def materialize_document(self, doc: DocumentSnapshot) -> Product:
        return Product.from_document(doc)

    def get(self, product_id: str) -> Optional[Product]:
        for product in self.items:
            if product.id == product_id:
                return product
        return None


def _order_sort_key(order: Order):
    # unstamped orders count as the oldest
    if order.timestamp is None:
        return (0, 0, 0)
    return (1, order.timestamp.seconds, order.timestamp.nanos)


class OrderMirror(RemoteMirror[Order]):
    """Orders newest first; sorted() keeps ties in snapshot order."""

    name = "orders"

    def materialize_document(self, doc: DocumentSnapshot) -> Order:
        return Order.from_document(doc)

    def materialize(self, snapshot: Snapshot) -> List[Order]:
        return sorted(super().materialize(snapshot), key=_order_sort_key, reverse=True)
