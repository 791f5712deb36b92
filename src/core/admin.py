from __future__ import annotations

import math
from typing import Callable, Optional

from core.checkout import Alert, DocumentWriter
from core.errors import ValidationError, WriteError
from utils.logger import get_logger

_logger = get_logger(__name__)


def parse_product_fields(name: str, price: str, image: str, description: str) -> dict:
    """Validate the admin form and return the product document fields."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Product name is required.")
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number.") from None
    if not math.isfinite(value):
        raise ValidationError("Price must be a number.")
    if value < 0:
        raise ValidationError("Price cannot be negative.")

    return {
        "name": name,
        "price": value,
        "image": (image or "").strip(),
        "description": (description or "").strip(),
    }


class ProductPublisher:
    """Adds products to the catalog collection from the admin view."""

    def __init__(
        self,
        store: DocumentWriter,
        products_path: str,
        alert: Alert,
        on_form_reset: Optional[Callable[[], None]] = None,
    ) -> None:
        self.store = store
        self.products_path = products_path
        self.alert = alert
        self.on_form_reset = on_form_reset

    async def add_product(
        self, name: str, price: str, image: str = "", description: str = ""
    ) -> Optional[str]:
        try:
            fields = parse_product_fields(name, price, image, description)
        except ValidationError as exc:
            self.alert(exc.message, "warning")
            return None

        try:
            product_id = await self.store.create_document(self.products_path, fields)
        except WriteError as exc:
            _logger.error(f"Error adding product: {exc}")
            self.alert("Failed to add product. Please try again.", "error")
            return None
        except Exception as exc:
            _logger.exception(f"Unexpected error adding product: {exc}")
            self.alert("Failed to add product. Please try again.", "error")
            return None

        _logger.info(f"Product {product_id} added: {fields['name']}")
        if self.on_form_reset:
            self.on_form_reset()
        self.alert("Product added.", "information")
        return product_id
