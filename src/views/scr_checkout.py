from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Input, Label, Markdown

from core.models import ViewState
from utils.pure import generate_markdown_table
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal

FIELDS = {
    "input-customer-name": "Full name",
    "input-customer-address": "Delivery address",
    "input-customer-phone": "Phone number",
}


class CheckoutScreen(BaseScreen):
    """
    Order summary plus the customer form. Payment is cash on delivery, so
    there is nothing else to collect.
    """

    VIEW = ViewState.CHECKOUT

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="vertscroll-checkout"):
            with Vertical(id="div-customer"):
                yield Label("Shipping Information", classes="label-section")
                yield Label("Full name")
                yield Input(placeholder="Jane Doe", id="input-customer-name")
                yield Label("Delivery address")
                yield Input(
                    placeholder="123 Main St, Anytown", id="input-customer-address"
                )
                yield Label("Phone number")
                yield Input(placeholder="555-0100", id="input-customer-phone")
                yield Label("Payment: Cash on Delivery", id="label-payment")
            yield Markdown("", id="md-order-summary")
        with Horizontal(id="hort-buttons"):
            yield Button("Back to Cart", id="btn-back-to-cart")
            yield Button("Place Order", id="btn-place-order", variant="primary")

    @work(exclusive=True, group="render")
    async def refresh_content(self) -> None:
        summary = self.app.order_summary
        if summary is None:
            return

        rows = [[line.name, f"x {line.quantity}", line.line_total] for line in summary.lines]
        md = "### Order Summary\n\n"
        md += generate_markdown_table(["Item", "Qty", "Price"], rows, ["l", "c", "r"])
        md += f"\n\n**Total:** {summary.total}"
        await self.query_one("#md-order-summary", Markdown).update(md)

    def reset_form(self) -> None:
        for input_id in FIELDS:
            field = self.query_one(f"#{input_id}", Input)
            field.value = ""
            field.remove_class("-invalid")

    @on(Button.Pressed, "#btn-back-to-cart")
    def handle_back(self) -> None:
        self.request_view(ViewState.CART)

    @on(Button.Pressed, "#btn-place-order")
    @work(exclusive=True, group="submit")
    async def handle_submit(self) -> None:
        values = {}
        for input_id, caption in FIELDS.items():
            field = self.query_one(f"#{input_id}", Input)
            if not field.value.strip():
                field.add_class("-invalid")
                field.focus()
                self.notify(f"{caption} is required.", severity="error")
                return
            field.remove_class("-invalid")
            values[input_id] = field.value

        if not await self.app.push_screen_wait(
            DialogModal(
                "Place order? This cannot be undone.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        button = self.query_one("#btn-place-order", Button)
        button.disabled = True
        try:
            await self.app.controller.place_order(
                values["input-customer-name"],
                values["input-customer-address"],
                values["input-customer-phone"],
            )
        finally:
            button.disabled = False
