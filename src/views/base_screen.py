from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, ListItem, ListView

from core.models import ViewState
from utils.messages import ViewRequestedMessage
from views.modal_dialog import QuitDialogModal

MENU = {
    ViewState.CATALOG: "Shop",
    ViewState.CART: "Cart",
    ViewState.ADMIN: "Admin",
}


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("Menu", id="label-menu")
        yield ListView(
            *[
                ListItem(Label(text), id="list-menu-item-" + view.value)
                for view, text in MENU.items()
            ],
            id="list-menu",
        )
        yield Label("", id="label-cart-badge")

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        view = ViewState(event.item.id.removeprefix("list-menu-item-"))
        self.post_message(ViewRequestedMessage(view))

    def highlight_item(self, view: ViewState) -> None:
        for item in self.query_one("#list-menu", ListView).children:
            item.highlighted = item.id == "list-menu-item-" + view.value

    def update_badge(self, count: int) -> None:
        badge = self.query_one("#label-cart-badge", Label)
        badge.update(f"Cart: {count} item{'s' if count != 1 else ''}" if count else "")
        badge.set_class(count == 0, "hidden")


class BaseScreen(Screen):
    """
    Inherited by every storefront view: header, footer, sidebar menu with the
    cart badge, and the quit binding.

    Subclasses set VIEW and implement refresh_content(), which must rebuild
    the screen from what the app currently holds.
    """

    VIEW: ViewState = ViewState.CATALOG

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()
        self.sub_title = self.app.VIEW_TITLES.get(self.VIEW.value, "")

    def compose(self) -> ComposeResult:
        yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    def on_mount(self) -> None:
        self.refresh_content()

    def on_screen_resume(self) -> None:
        self.sync_chrome()
        self.refresh_content()
        self.reset_scroll()

    def sync_chrome(self) -> None:
        sidebar = self.query_one(Sidebar)
        sidebar.highlight_item(self.VIEW)
        sidebar.update_badge(self.app.cart_count)

    def update_badge(self, count: int) -> None:
        self.query_one(Sidebar).update_badge(count)

    def reset_scroll(self) -> None:
        for scroll in self.query(VerticalScroll):
            scroll.scroll_home(animate=False)

    def refresh_content(self) -> None:
        pass

    def request_view(self, view: ViewState) -> None:
        self.post_message(ViewRequestedMessage(view))

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())

    @on(ViewRequestedMessage)
    def keep_highlight(self) -> None:
        # the menu follows the navigator, not the cursor
        self.query_one(Sidebar).highlight_item(self.VIEW)
