from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_APP_ID = "default-grocery-mvp"
DEFAULT_DB_PATH = "data/storefront.sqlite"


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, read from the environment.

    Fields:
      - app_id: namespace of the collections inside the document store
      - db_path: sqlite file backing the local document store
      - auth_token: custom sign-in token; anonymous sign-in when None
    """

    app_id: str = DEFAULT_APP_ID
    db_path: str = DEFAULT_DB_PATH
    auth_token: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            app_id=os.getenv("STOREFRONT_APP_ID") or DEFAULT_APP_ID,
            db_path=os.getenv("STOREFRONT_DB_PATH") or DEFAULT_DB_PATH,
            auth_token=os.getenv("STOREFRONT_AUTH_TOKEN") or None,
        )

    @property
    def products_path(self) -> str:
        return f"artifacts/{self.app_id}/public/data/products"

    @property
    def orders_path(self) -> str:
        return f"artifacts/{self.app_id}/public/data/orders"
