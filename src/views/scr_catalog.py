from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, HorizontalGroup, VerticalScroll
from textual.widgets import Button, Label, LoadingIndicator

from core.viewmodels import ProductCard
from utils.messages import AddToCartMessage
from views.base_screen import BaseScreen

NO_PRODUCTS = "No products have been added yet. Visit the Admin panel to add some."


class ProductCardWidget(HorizontalGroup):
    def __init__(self, card: ProductCard):
        super().__init__(classes="product-card")
        self.card = card

    def compose(self) -> ComposeResult:
        with Container(classes="div-product"):
            yield Label(self.card.name, classes="label-product-name")
            yield Label(self.card.description, classes="label-product-descr")
            if self.card.image:
                yield Label(self.card.image, classes="label-product-image")
        yield Label(self.card.price, classes="label-product-price")
        yield Button("+ Add", classes="btn-add", variant="success")

    @on(Button.Pressed, ".btn-add")
    def handle_add(self, event: Button.Pressed) -> None:
        event.stop()
        self.post_message(AddToCartMessage(self.card.id))
        self.app.notify(f"{self.card.name} added to cart.")


class CatalogScreen(BaseScreen):
    """
    Product list, rebuilt from the latest catalog snapshot every time it
    changes. Shows a loading indicator until the first snapshot arrives.
    """

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(LoadingIndicator(), id="vertscroll-products")

    @work(exclusive=True, group="render")
    async def refresh_content(self) -> None:
        cards = self.app.product_cards
        error = self.app.products_error

        content = self.query_one("#vertscroll-products", VerticalScroll)
        await content.remove_children()

        widgets = []
        if error:
            widgets.append(Label(error, classes="label-load-error"))
        if cards is None:
            if not error:
                widgets.append(LoadingIndicator())
        elif not cards:
            widgets.append(Label(NO_PRODUCTS, classes="label-empty"))
        else:
            widgets.extend(ProductCardWidget(card) for card in cards)
        await content.mount_all(widgets)
