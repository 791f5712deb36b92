from __future__ import annotations

from dataclasses import dataclass

from core.admin import ProductPublisher
from core.cart import CartStore
from core.checkout import CheckoutCoordinator
from core.mirror import CatalogMirror, OrderMirror
from core.navigator import ViewNavigator
from core.session import SessionGate


@dataclass
class StorefrontState:
    """
    Centralized application state, owned by the StorefrontController and
    handed to whoever needs to read it.

    Fields:
      - cart: lines the customer picked, local only
      - navigator: the active view
      - session: whether an identity is established yet
      - catalog / orders: latest snapshots of the remote collections
      - checkout / publisher: the two writers to the document store
    """

    cart: CartStore
    navigator: ViewNavigator
    session: SessionGate
    catalog: CatalogMirror
    orders: OrderMirror
    checkout: CheckoutCoordinator
    publisher: ProductPublisher
