"""Test doubles for the document store, identity provider and rendering sink."""

import asyncio
import os
import sys

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from core.errors import WriteError  # noqa: E402
from core.models import Product  # noqa: E402
from docstore.models import (  # noqa: E402
    DocumentSnapshot,
    Identity,
    Snapshot,
    SnapshotEvent,
    Timestamp,
)


def product(pid: str, price: float, name: str = "", image: str = "") -> Product:
    return Product(
        id=pid,
        name=name or f"Product {pid}",
        description="",
        price=price,
        image=image or f"https://img.example/{pid}.png",
    )


def snapshot(path: str, *docs) -> Snapshot:
    """docs are (id, data) pairs."""
    return Snapshot(path=path, docs=tuple(DocumentSnapshot(i, d) for i, d in docs))


def order_doc(name: str, ts=None) -> dict:
    data = {
        "customer": {"name": name, "address": "1 Main St", "phone": "555"},
        "items": [
            {"productId": "p1", "name": "Apple", "price": 1.5, "image": "", "quantity": 2}
        ],
        "status": "Placed",
        "paymentMethod": "Cash on Delivery",
    }
    if ts is not None:
        data["timestamp"] = Timestamp(ts)
    return data


async def feed(*events: SnapshotEvent):
    for event in events:
        yield event


async def wait_for(predicate, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


class FakeStore:
    def __init__(self, fail: bool = False, error: Exception = None):
        self.fail = fail
        self.error = error
        self.created = []

    async def create_document(self, path, fields):
        if self.error is not None:
            raise self.error
        if self.fail:
            raise WriteError("service unavailable")
        doc_id = f"doc-{len(self.created) + 1}"
        self.created.append((path, doc_id, fields))
        return doc_id


class FakeProvider:
    """Identity provider whose sign-in outcome is decided by the test."""

    def __init__(self, error: Exception = None, repeat: int = 1, current_user=None):
        self.current_user = current_user
        self.error = error
        self.repeat = repeat
        self.callbacks = []
        self.sign_in_calls = 0

    def on_identity_change(self, callback):
        self.callbacks.append(callback)
        callback(self.current_user)

    async def establish_session(self, token=None):
        self.sign_in_calls += 1
        if self.error is not None:
            raise self.error
        self.current_user = Identity(uid="user-1")
        for _ in range(self.repeat):
            for callback in self.callbacks:
                callback(self.current_user)
        return self.current_user


class RecordingSink:
    """Records every call the controller makes on the rendering side."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            self.calls.append((name, args))

        return record

    def names(self):
        return [name for name, _ in self.calls]

    def last(self, name):
        for call_name, args in reversed(self.calls):
            if call_name == name:
                return args
        return None

    def count(self, name):
        return self.names().count(name)
