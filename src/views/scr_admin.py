from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.validation import Number
from textual.widgets import Button, Input, Label, LoadingIndicator, Markdown

from core.models import ViewState
from core.viewmodels import OrderCard
from utils.pure import generate_markdown_table
from views.base_screen import BaseScreen

PRODUCT_FIELDS = (
    "input-product-name",
    "input-product-price",
    "input-product-image",
    "input-product-description",
)


def order_card_markdown(card: OrderCard) -> str:
    rows = [[item.name, f"x{item.quantity}", item.line_total] for item in card.items]
    return (
        f"#### {card.customer_name} · {card.total}\n\n"
        f"{card.customer_address}  \n"
        f"{card.customer_phone}  \n"
        f"Order ID: `{card.id}` · {card.placed_at}\n\n"
        + generate_markdown_table(["Item", "Qty", "Price"], rows, ["l", "c", "r"])
    )


class AdminScreen(BaseScreen):
    """
    Add products to the catalog; follow incoming orders, newest first.
    """

    VIEW = ViewState.ADMIN

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-admin"):
            with Vertical(id="div-add-product"):
                yield Label("Add New Product", classes="label-section")
                yield Label("Name")
                yield Input(placeholder="Organic Apples", id="input-product-name")
                yield Label("Price ($)")
                yield Input(
                    placeholder="2.99",
                    id="input-product-price",
                    type="number",
                    validators=[Number(minimum=0.0)],
                )
                yield Label("Image URL")
                yield Input(
                    placeholder="https://example.com/apples.jpg",
                    id="input-product-image",
                )
                yield Label("Description")
                yield Input(placeholder="Crisp and sweet", id="input-product-description")
                yield Button("Add Product", id="btn-add-product", variant="success")
            with Vertical(id="div-orders"):
                yield Label("Recent Orders", classes="label-section")
                yield VerticalScroll(LoadingIndicator(), id="vertscroll-orders")

    @work(exclusive=True, group="render")
    async def refresh_content(self) -> None:
        cards = self.app.order_cards
        error = self.app.orders_error

        content = self.query_one("#vertscroll-orders", VerticalScroll)
        await content.remove_children()

        widgets = []
        if error:
            widgets.append(Label(error, classes="label-load-error"))
        if cards is None:
            if not error:
                widgets.append(LoadingIndicator())
        elif not cards:
            widgets.append(Label("No orders yet.", classes="label-empty"))
        else:
            widgets.extend(
                Markdown(order_card_markdown(card), classes="md-order-card")
                for card in cards
            )
        await content.mount_all(widgets)

    def reset_form(self) -> None:
        for input_id in PRODUCT_FIELDS:
            self.query_one(f"#{input_id}", Input).value = ""
        self.query_one("#input-product-name", Input).focus()

    @on(Button.Pressed, "#btn-add-product")
    @work(exclusive=True, group="submit")
    async def handle_add_product(self) -> None:
        name, price, image, description = (
            self.query_one(f"#{input_id}", Input).value for input_id in PRODUCT_FIELDS
        )
        button = self.query_one("#btn-add-product", Button)
        button.disabled = True
        try:
            await self.app.controller.add_product(name, price, image, description)
        finally:
            button.disabled = False
