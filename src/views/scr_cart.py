from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, VerticalScroll
from textual.widgets import Button, Label, Rule

from core.models import ViewState
from core.viewmodels import CartLineView
from utils.messages import CartQuantityMessage, CartRemoveMessage
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal


class CartLineWidget(HorizontalGroup):
    def __init__(self, line: CartLineView):
        super().__init__(classes="cart-line")
        self.line = line

    def compose(self) -> ComposeResult:
        with Container(classes="div-item"):
            yield Label(self.line.name, classes="label-item-name")
            yield Label(self.line.price, classes="label-item-price")
        with Horizontal(classes="div-qty"):
            yield Button("-", classes="btn-qty-sub")
            yield Label(str(self.line.quantity), classes="label-item-qty")
            yield Button("+", classes="btn-qty-add")
        yield Label(self.line.line_total, classes="label-item-total")
        yield Button("Remove", classes="btn-remove", variant="error")

    @on(Button.Pressed, ".btn-qty-sub")
    def handle_sub(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(CartQuantityMessage(self.line.product_id, -1))

    @on(Button.Pressed, ".btn-qty-add")
    def handle_add(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(CartQuantityMessage(self.line.product_id, 1))

    @on(Button.Pressed, ".btn-remove")
    @work()
    async def handle_remove(self) -> None:
        remove_confirmed = await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove this item from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        )
        if remove_confirmed:
            self.post_message(CartRemoveMessage(self.line.product_id))
            self.app.notify("Item removed from cart.", severity="information")


class CartScreen(BaseScreen):
    """
    Cart lines with quantity controls, the running total and the way on to
    checkout.
    """

    VIEW = ViewState.CART

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(id="vertscroll-cart")
        yield Label("Total: $0.00", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("Continue Shopping", id="btn-back-to-shop")
            yield Button("Proceed to Checkout", id="btn-checkout", variant="primary")

    @work(exclusive=True, group="render")
    async def refresh_content(self) -> None:
        view = self.app.cart_view

        content = self.query_one("#vertscroll-cart", VerticalScroll)
        await content.remove_children()
        if view.empty:
            await content.mount(Label("Your cart is empty.", classes="label-empty"))
        else:
            await content.mount_all([CartLineWidget(line) for line in view.lines])

        self.query_one("#label-cart-total", Label).update(f"Total: {view.total}")
        self.query_one("#btn-checkout", Button).disabled = view.empty

    @on(Button.Pressed, "#btn-back-to-shop")
    def handle_back(self) -> None:
        self.request_view(ViewState.CATALOG)

    @on(Button.Pressed, "#btn-checkout")
    def handle_checkout(self) -> None:
        self.request_view(ViewState.CHECKOUT)
