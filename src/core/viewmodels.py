"""
Render-ready, immutable view-models.

Each builder takes the current value of exactly one piece of state and
returns plain data. Nothing here holds state between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from core.models import CartLine, Order, Product
from utils.pure import format_money, format_timestamp


@dataclass(frozen=True)
class ProductCard:
    id: str
    name: str
    description: str
    price: str
    image: str


@dataclass(frozen=True)
class CartLineView:
    product_id: str
    name: str
    image: str
    price: str
    quantity: int
    line_total: str


@dataclass(frozen=True)
class CartView:
    lines: Tuple[CartLineView, ...]
    total: str
    item_count: int

    @property
    def empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class SummaryLine:
    name: str
    quantity: int
    line_total: str


@dataclass(frozen=True)
class OrderSummary:
    lines: Tuple[SummaryLine, ...]
    total: str


@dataclass(frozen=True)
class OrderCard:
    id: str
    customer_name: str
    customer_address: str
    customer_phone: str
    placed_at: str
    total: str
    items: Tuple[SummaryLine, ...]


def product_cards(products: Iterable[Product]) -> Tuple[ProductCard, ...]:
    return tuple(
        ProductCard(
            id=p.id,
            name=p.name,
            description=p.description,
            price=format_money(p.price),
            image=p.image,
        )
        for p in products
    )


def cart_view(lines: Iterable[CartLine]) -> CartView:
    lines = tuple(lines)
    return CartView(
        lines=tuple(
            CartLineView(
                product_id=line.product_id,
                name=line.name,
                image=line.image,
                price=format_money(line.price),
                quantity=line.quantity,
                line_total=format_money(line.line_total),
            )
            for line in lines
        ),
        total=format_money(sum(line.line_total for line in lines)),
        item_count=sum(line.quantity for line in lines),
    )


def _summary_lines(lines: Iterable[CartLine]) -> Tuple[SummaryLine, ...]:
    return tuple(
        SummaryLine(
            name=line.name,
            quantity=line.quantity,
            line_total=format_money(line.line_total),
        )
        for line in lines
    )


def order_summary(lines: Iterable[CartLine]) -> Optional[OrderSummary]:
    lines = tuple(lines)
    if not lines:
        return None
    return OrderSummary(
        lines=_summary_lines(lines),
        total=format_money(sum(line.line_total for line in lines)),
    )


def order_cards(orders: Iterable[Order]) -> Tuple[OrderCard, ...]:
    return tuple(
        OrderCard(
            id=o.id or "",
            customer_name=o.customer.name,
            customer_address=o.customer.address,
            customer_phone=o.customer.phone,
            placed_at=format_timestamp(o.timestamp),
            total=format_money(o.total),
            items=_summary_lines(o.items),
        )
        for o in orders
    )
