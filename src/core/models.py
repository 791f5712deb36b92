# domain dataclasses of the storefront

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from docstore.models import DocumentSnapshot, Timestamp, server_timestamp

ORDER_STATUS_PLACED = "Placed"
PAYMENT_CASH_ON_DELIVERY = "Cash on Delivery"


class ViewState(enum.Enum):
    CATALOG = "catalog"
    CART = "cart"
    CHECKOUT = "checkout"
    CONFIRMATION = "confirmation"
    ADMIN = "admin"


class SessionState(enum.Enum):
    PENDING = "pending"
    ESTABLISHED = "established"
    FAILED = "failed"


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    price: float
    image: str

    @classmethod
    def from_document(cls, doc: DocumentSnapshot) -> "Product":
        data = doc.to_dict()
        return cls(
            id=data["id"],
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            price=float(data.get("price", 0.0)),
            image=str(data.get("image", "")),
        )


@dataclass(frozen=True)
class CartLine:
    """Product fields captured when the product was first added to the cart."""

    product_id: str
    name: str
    price: float
    image: str
    quantity: int = 1

    @classmethod
    def from_product(cls, product: Product) -> "CartLine":
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            image=product.image,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        return cls(
            product_id=str(data.get("productId", "")),
            name=str(data.get("name", "")),
            price=float(data.get("price", 0.0)),
            image=str(data.get("image", "")),
            quantity=int(data.get("quantity", 0)),
        )

    def with_quantity(self, quantity: int) -> "CartLine":
        return replace(self, quantity=quantity)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_document(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class CustomerInfo:
    name: str
    address: str
    phone: str

    def to_document(self) -> Dict[str, str]:
        return {"name": self.name, "address": self.address, "phone": self.phone}


@dataclass(frozen=True)
class Order:
    customer: CustomerInfo
    items: Tuple[CartLine, ...]
    status: str = ORDER_STATUS_PLACED
    payment_method: str = PAYMENT_CASH_ON_DELIVERY
    timestamp: Optional[Timestamp] = None
    id: Optional[str] = field(default=None, compare=False)

    @property
    def total(self) -> float:
        return sum(item.line_total for item in self.items)

    def to_document(self) -> Dict[str, Any]:
        """Fields to write; the store fills in the timestamp at commit."""
        return {
            "customer": self.customer.to_document(),
            "items": [item.to_document() for item in self.items],
            "status": self.status,
            "paymentMethod": self.payment_method,
            "timestamp": server_timestamp(),
        }

    @classmethod
    def from_document(cls, doc: DocumentSnapshot) -> "Order":
        data = doc.to_dict()
        customer = data.get("customer") or {}
        items = data.get("items") or []
        if not isinstance(customer, dict):
            raise TypeError(f"customer must be a map, not {type(customer).__name__}")
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            raise TypeError("items must be a list of maps")
        timestamp = data.get("timestamp")
        return cls(
            id=data["id"],
            customer=CustomerInfo(
                name=str(customer.get("name", "")),
                address=str(customer.get("address", "")),
                phone=str(customer.get("phone", "")),
            ),
            items=tuple(CartLine.from_dict(item) for item in items),
            status=str(data.get("status", ORDER_STATUS_PLACED)),
            payment_method=str(data.get("paymentMethod", PAYMENT_CASH_ON_DELIVERY)),
            timestamp=timestamp if isinstance(timestamp, Timestamp) else None,
        )
