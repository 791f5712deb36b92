from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Protocol

from core.cart import CartStore
from core.errors import WriteError
from core.models import CustomerInfo, Order, ViewState
from core.navigator import ViewNavigator
from core.viewmodels import OrderSummary, order_summary
from utils.logger import get_logger

_logger = get_logger(__name__)

Alert = Callable[[str, str], None]


class DocumentWriter(Protocol):
    async def create_document(self, path: str, fields: Dict[str, Any]) -> str: ...


class CheckoutCoordinator:
    """
    Turns the cart plus customer details into an order document.

    The order carries a copy of the cart lines taken when it is placed; the
    cart is only cleared once the store has accepted the write.
    """

    def __init__(
        self,
        cart: CartStore,
        navigator: ViewNavigator,
        store: DocumentWriter,
        orders_path: str,
        alert: Alert,
        on_form_reset: Optional[Callable[[], None]] = None,
    ) -> None:
        self.cart = cart
        self.navigator = navigator
        self.store = store
        self.orders_path = orders_path
        self.alert = alert
        self.on_form_reset = on_form_reset
        self.last_order_id: Optional[str] = None

    def render_summary(self) -> Optional[OrderSummary]:
        """Summary of the cart for the checkout view.

        With an empty cart there is nothing to check out: go back to the
        catalog and return None.
        """
        if self.cart.is_empty():
            self.navigator.switch_to(ViewState.CATALOG)
            return None
        return order_summary(self.cart.lines())

    async def place_order(self, customer: CustomerInfo) -> Optional[str]:
        if self.cart.is_empty():
            self.alert("Your cart is empty!", "warning")
            return None

        order = Order(customer=customer, items=self.cart.lines())
        try:
            order_id = await self.store.create_document(
                self.orders_path, order.to_document()
            )
        except WriteError as exc:
            _logger.error(f"Error placing order: {exc}")
            self.alert("Could not place order. Please try again.", "error")
            return None
        except Exception as exc:
            _logger.exception(f"Unexpected error placing order: {exc}")
            self.alert("Could not place order. Please try again.", "error")
            return None

        _logger.info(f"Order {order_id} placed, {len(order.items)} lines")
        self.last_order_id = order_id
        self.cart.clear()
        if self.on_form_reset:
            self.on_form_reset()
        self.navigator.switch_to(ViewState.CONFIRMATION, order_id=order_id)
        return order_id
