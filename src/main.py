from typing import Optional, Sequence, Tuple

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from core.controller import StorefrontController
from core.models import ViewState
from core.navigator import ViewTransition
from core.viewmodels import CartView, OrderCard, OrderSummary, ProductCard, cart_view
from docstore import database
from docstore.documents import DocumentStore
from docstore.identity import IdentityProvider
from utils.config import Settings
from utils.logger import get_logger
from utils.messages import (
    AddToCartMessage,
    CartQuantityMessage,
    CartRemoveMessage,
    QuitRequestedMessage,
    ViewRequestedMessage,
)
from views.base_screen import BaseScreen
from views.modal_dialog import FatalErrorScreen
from views.scr_admin import AdminScreen
from views.scr_cart import CartScreen
from views.scr_catalog import CatalogScreen
from views.scr_checkout import CheckoutScreen
from views.scr_confirmation import ConfirmationScreen

_logger = get_logger(__name__)


class StorefrontApp(App):
    """
    Terminal storefront. The app is the rendering side of the controller: it
    keeps the latest view-model of every piece of state and redraws whichever
    screen is showing it.
    """

    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        ViewState.CATALOG.value: CatalogScreen,
        ViewState.CART.value: CartScreen,
        ViewState.CHECKOUT.value: CheckoutScreen,
        ViewState.CONFIRMATION.value: ConfirmationScreen,
        ViewState.ADMIN.value: AdminScreen,
    }

    VIEW_TITLES = {
        ViewState.CATALOG.value: "Fresh Groceries",
        ViewState.CART.value: "Your Shopping Cart",
        ViewState.CHECKOUT.value: "Checkout",
        ViewState.CONFIRMATION.value: "Order Confirmed",
        ViewState.ADMIN.value: "Admin Panel",
    }

    CSS_PATH = "styles/storefront.tcss"

    controller: StorefrontController

    def __init__(self, settings: Optional[Settings] = None):
        super().__init__()
        self.settings = settings or Settings.from_env()
        self.title = "Grocery Storefront"

        self.product_cards: Optional[Tuple[ProductCard, ...]] = None
        self.products_error: Optional[str] = None
        self.order_cards: Optional[Tuple[OrderCard, ...]] = None
        self.orders_error: Optional[str] = None
        self.cart_view: CartView = cart_view(())
        self.cart_count = 0
        self.order_summary: Optional[OrderSummary] = None
        self.confirmed_order_id = ""

        database.configure(self.settings.db_path)
        self.identity = IdentityProvider()
        self.store = DocumentStore(self.identity)
        self.controller = StorefrontController(
            self.store, self.identity, self.settings, self
        )

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        await self.switch_mode(self.controller.state.navigator.current.value)
        self.start_session()

    @work
    async def start_session(self) -> None:
        _logger.info(f"Starting storefront '{self.settings.app_id}' on {self.settings.db_path}")
        await self.controller.start()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    # ---------------------------
    # User actions
    # ---------------------------

    @on(ViewRequestedMessage)
    def handle_view_requested(self, message: ViewRequestedMessage) -> None:
        self.controller.open_view(message.view)

    @on(AddToCartMessage)
    def handle_add_to_cart(self, message: AddToCartMessage) -> None:
        self.controller.add_to_cart(message.product_id)

    @on(CartQuantityMessage)
    def handle_cart_quantity(self, message: CartQuantityMessage) -> None:
        self.controller.change_quantity(message.product_id, message.delta)

    @on(CartRemoveMessage)
    def handle_cart_remove(self, message: CartRemoveMessage) -> None:
        self.controller.remove_from_cart(message.product_id)

    @on(QuitRequestedMessage)
    @work
    async def handle_quit(self):
        await self.controller.stop()
        await self.store.close()
        self.exit()

    # ---------------------------
    # Rendering sink
    # ---------------------------

    def _showing(self, view: ViewState) -> Optional[BaseScreen]:
        screen = self.screen
        if isinstance(screen, BaseScreen) and screen.VIEW is view:
            return screen
        return None

    def _redraw_view(self, view: ViewState) -> None:
        screen = self._showing(view)
        if screen:
            screen.refresh_content()

    def render_products(self, cards: Sequence[ProductCard]) -> None:
        self.product_cards = tuple(cards)
        self.products_error = None
        self._redraw_view(ViewState.CATALOG)

    def render_cart(self, view: CartView) -> None:
        self.cart_view = view
        self._redraw_view(ViewState.CART)

    def render_orders(self, cards: Sequence[OrderCard]) -> None:
        self.order_cards = tuple(cards)
        self.orders_error = None
        self._redraw_view(ViewState.ADMIN)

    def render_order_summary(self, summary: OrderSummary) -> None:
        self.order_summary = summary
        self._redraw_view(ViewState.CHECKOUT)

    def render_confirmation(self, order_id: str) -> None:
        self.confirmed_order_id = order_id
        self._redraw_view(ViewState.CONFIRMATION)

    def update_badge(self, count: int) -> None:
        self.cart_count = count
        if isinstance(self.screen, BaseScreen):
            self.screen.update_badge(count)

    def show_view(self, transition: ViewTransition) -> None:
        self.call_later(self._show_view, transition.current)

    async def _show_view(self, view: ViewState) -> None:
        if self.current_mode != view.value:
            # the screen redraws and scrolls to the top on resume
            await self.switch_mode(view.value)
            return
        screen = self._showing(view)
        if screen:
            screen.refresh_content()
            screen.reset_scroll()

    def show_mirror_error(self, view: ViewState, message: str) -> None:
        if view is ViewState.CATALOG:
            self.products_error = message
        else:
            self.orders_error = message
        self._redraw_view(view)

    def show_fatal(self, message: str, detail: str) -> None:
        self.push_screen(FatalErrorScreen(message, detail))

    def alert(self, message: str, severity: str) -> None:
        self.notify(message, severity=severity)

    def reset_checkout_form(self) -> None:
        screen = self.screen
        if isinstance(screen, CheckoutScreen):
            screen.reset_form()

    def reset_product_form(self) -> None:
        screen = self.screen
        if isinstance(screen, AdminScreen):
            screen.reset_form()


def run() -> None:
    app = StorefrontApp()
    app.run()


if __name__ == "__main__":
    run()
