"""
Root controller: builds the application state and wires its components to
each other, to the document store and to the rendering sink.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol, Sequence, Set, Union

from core.admin import ProductPublisher
from core.cart import CartStore
from core.checkout import CheckoutCoordinator
from core.errors import SessionError, SubscriptionError
from core.mirror import CatalogMirror, OrderMirror, RemoteMirror
from core.models import CustomerInfo, Order, Product, ViewState
from core.navigator import ViewNavigator, ViewTransition
from core.session import SessionGate
from core.viewmodels import (
    CartView,
    OrderCard,
    OrderSummary,
    ProductCard,
    cart_view,
    order_cards,
    product_cards,
)
from docstore.models import Identity, SnapshotEvent
from utils.config import Settings
from utils.logger import get_logger
from utils.state import StorefrontState

_logger = get_logger(__name__)

PRODUCTS_LOAD_ERROR = "Could not load products."
ORDERS_LOAD_ERROR = "Could not load orders."
SESSION_ERROR = "Could not authenticate with the service. Please restart the app."


class RenderSink(Protocol):
    """What the controller needs from the rendering side. Pure sink."""

    def render_products(self, cards: Sequence[ProductCard]) -> None: ...

    def render_cart(self, view: CartView) -> None: ...

    def render_orders(self, cards: Sequence[OrderCard]) -> None: ...

    def render_order_summary(self, summary: OrderSummary) -> None: ...

    def render_confirmation(self, order_id: str) -> None: ...

    def update_badge(self, count: int) -> None: ...

    def show_view(self, transition: ViewTransition) -> None: ...

    def show_mirror_error(self, view: ViewState, message: str) -> None: ...

    def show_fatal(self, message: str, detail: str) -> None: ...

    def alert(self, message: str, severity: str) -> None: ...

    def reset_checkout_form(self) -> None: ...

    def reset_product_form(self) -> None: ...


class StorefrontController:
    def __init__(self, store, identity, settings: Settings, sink: RenderSink) -> None:
        self.store = store
        self.identity = identity
        self.settings = settings
        self.sink = sink
        self._tasks: Set[asyncio.Task] = set()

        catalog = CatalogMirror(
            on_render=self._render_products,
            on_error=lambda e: self._mirror_failed(ViewState.CATALOG, PRODUCTS_LOAD_ERROR, e),
        )
        orders = OrderMirror(
            on_render=self._render_orders,
            on_error=lambda e: self._mirror_failed(ViewState.ADMIN, ORDERS_LOAD_ERROR, e),
        )
        cart = CartStore(catalog.get)
        navigator = ViewNavigator()
        self.state = StorefrontState(
            cart=cart,
            navigator=navigator,
            session=SessionGate(self._session_ready, self._session_failed),
            catalog=catalog,
            orders=orders,
            checkout=CheckoutCoordinator(
                cart,
                navigator,
                store,
                settings.orders_path,
                sink.alert,
                on_form_reset=sink.reset_checkout_form,
            ),
            publisher=ProductPublisher(
                store,
                settings.products_path,
                sink.alert,
                on_form_reset=sink.reset_product_form,
            ),
        )
        cart.on_change(self._cart_changed)
        navigator.on_transition(self._view_changed)

    # ---------------------------
    # Lifecycle
    # ---------------------------

    async def start(self) -> None:
        """Sign in; the mirrors subscribe once the session is established."""
        await self.state.session.start(self.identity, self.settings.auth_token)

    async def stop(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _session_ready(self, identity: Identity) -> None:
        self._spawn(self.state.catalog, self.settings.products_path)
        self._spawn(self.state.orders, self.settings.orders_path)

    def _session_failed(self, error: SessionError) -> None:
        self.sink.show_fatal(SESSION_ERROR, error.message)

    def _spawn(self, mirror: RemoteMirror, path: str) -> None:
        task = asyncio.create_task(self._run_mirror(mirror, path), name=f"mirror:{mirror.name}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_mirror(self, mirror: RemoteMirror, path: str) -> None:
        try:
            await mirror.run(self.store.subscribe(path))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            mirror.apply(SnapshotEvent(error=SubscriptionError(str(exc))))
        _logger.debug(f"Feed for {mirror.name} ended")

    # ---------------------------
    # State -> sink
    # ---------------------------

    def _render_products(self, products: Sequence[Product]) -> None:
        self.sink.render_products(product_cards(products))

    def _render_orders(self, orders: Sequence[Order]) -> None:
        self.sink.render_orders(order_cards(orders))

    def _mirror_failed(self, view: ViewState, message: str, error: SubscriptionError) -> None:
        self.sink.show_mirror_error(view, message)

    def _cart_changed(self, cart: CartStore) -> None:
        self.sink.update_badge(cart.item_count())
        self.sink.render_cart(cart_view(cart.lines()))

    def _view_changed(self, transition: ViewTransition) -> None:
        if transition.current is ViewState.CHECKOUT:
            summary = self.state.checkout.render_summary()
            if summary is None:
                return
            self.sink.show_view(transition)
            self.sink.render_order_summary(summary)
            return

        if transition.current is ViewState.CONFIRMATION:
            order_id = transition.context.get("order_id") or self.state.checkout.last_order_id
            self.sink.render_confirmation(order_id or "")
        self.sink.show_view(transition)
        if transition.current is ViewState.CART:
            self.sink.render_cart(cart_view(self.state.cart.lines()))

    # ---------------------------
    # User actions
    # ---------------------------

    def open_view(self, view: Union[ViewState, str]) -> bool:
        return self.state.navigator.switch_to(view)

    def add_to_cart(self, product_id: str) -> None:
        self.state.cart.add_item(product_id)

    def change_quantity(self, product_id: str, delta: int) -> None:
        self.state.cart.change_quantity(product_id, delta)

    def remove_from_cart(self, product_id: str) -> None:
        self.state.cart.remove_item(product_id)

    async def place_order(self, name: str, address: str, phone: str) -> Optional[str]:
        customer = CustomerInfo(name=name.strip(), address=address.strip(), phone=phone.strip())
        return await self.state.checkout.place_order(customer)

    async def add_product(
        self, name: str, price: str, image: str = "", description: str = ""
    ) -> Optional[str]:
        return await self.state.publisher.add_product(name, price, image, description)
