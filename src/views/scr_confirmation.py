from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Button, Label

from core.models import ViewState
from views.base_screen import BaseScreen


class ConfirmationScreen(BaseScreen):
    VIEW = ViewState.CONFIRMATION

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-confirmation"):
            yield Label("Thank you for your order!", id="label-thanks")
            yield Label("", id="label-order-id")
            yield Label("You will pay with cash when your groceries arrive.")
            yield Button("Place Another Order", id="btn-new-order", variant="primary")

    def refresh_content(self) -> None:
        self.query_one("#label-order-id", Label).update(
            f"Your order ID is: {self.app.confirmed_order_id}"
        )

    @on(Button.Pressed, "#btn-new-order")
    def handle_new_order(self) -> None:
        self.request_view(ViewState.CATALOG)
