from textual.message import Message

from core.models import ViewState


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class ViewRequestedMessage(Message):
    """
    Posted by any widget that wants another view on screen.
    Handled at App level, which hands it to the navigator.
    """

    bubble = True

    def __init__(self, view: ViewState) -> None:
        super().__init__()
        self.view = view


class AddToCartMessage(Message):
    """
    Fired by a product card when its Add button is pressed
    """

    bubble = True

    def __init__(self, product_id: str) -> None:
        super().__init__()
        self.product_id = product_id


class CartQuantityMessage(Message):
    """
    Fired by a cart line on +/-; delta is the signed change
    """

    bubble = True

    def __init__(self, product_id: str, delta: int) -> None:
        super().__init__()
        self.product_id = product_id
        self.delta = delta


class CartRemoveMessage(Message):
    """
    Fired by a cart line once removal was confirmed
    """

    bubble = True

    def __init__(self, product_id: str) -> None:
        super().__init__()
        self.product_id = product_id
