import asyncio
import os
import tempfile
import unittest

import fakes  # noqa: F401

from core.errors import AuthenticationError, PermissionDeniedError, WriteError
from docstore import database as db_database
from docstore.documents import DocumentStore
from docstore.identity import IdentityProvider
from docstore.models import SERVER_TIMESTAMP, Timestamp

PRODUCTS = "artifacts/test/public/data/products"
ORDERS = "artifacts/test/public/data/orders"


class DocumentStoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # Point the store to a temporary file and force re-initialization
        self.temp_dir = tempfile.TemporaryDirectory()
        db_database.configure(os.path.join(self.temp_dir.name, "test.sqlite"))
        self.auth = IdentityProvider()
        self.store = DocumentStore(self.auth)

    async def asyncTearDown(self):
        await self.store.close()

    def tearDown(self):
        self.temp_dir.cleanup()

    # ---------- Identity ----------

    async def test_anonymous_sign_in_notifies_listeners(self):
        seen = []
        self.auth.on_identity_change(seen.append)
        identity = await self.auth.establish_session()

        self.assertTrue(identity.anonymous)
        self.assertEqual(len(identity.uid), 28)
        self.assertEqual(seen, [None, identity])

        await self.auth.refresh()
        self.assertEqual(seen, [None, identity, identity])

    async def test_custom_token_sign_in(self):
        token = await self.auth.create_custom_token()
        identity = await self.auth.establish_session(token)
        self.assertFalse(identity.anonymous)
        self.assertIs(self.auth.current_user, identity)

    async def test_invalid_token_is_rejected(self):
        with self.assertRaises(AuthenticationError):
            await self.auth.establish_session("not-a-token")
        self.assertIsNone(self.auth.current_user)

    # ---------- Writes ----------

    async def test_unauthenticated_write_is_denied(self):
        with self.assertRaises(PermissionDeniedError):
            await self.store.create_document(PRODUCTS, {"name": "Tea"})

    async def test_server_timestamps_are_resolved_and_increasing(self):
        await self.auth.establish_session()
        first = await self.store.create_document(ORDERS, {"timestamp": SERVER_TIMESTAMP})
        second = await self.store.create_document(
            ORDERS, {"timestamp": SERVER_TIMESTAMP, "nested": {"at": SERVER_TIMESTAMP}}
        )
        self.assertEqual(len(first), 20)
        self.assertNotEqual(first, second)

        snap = await self.store.get_snapshot(ORDERS)
        self.assertEqual([d.id for d in snap], [first, second])
        t1 = snap.docs[0].data["timestamp"]
        t2 = snap.docs[1].data["timestamp"]
        self.assertIsInstance(t1, Timestamp)
        self.assertLess(t1, t2)
        self.assertEqual(snap.docs[1].data["nested"]["at"], t2)

    async def test_unstorable_payload_raises_write_error(self):
        await self.auth.establish_session()
        with self.assertRaises(WriteError):
            await self.store.create_document(PRODUCTS, {"price": object()})
        self.assertEqual(len(await self.store.get_snapshot(PRODUCTS)), 0)

    async def test_unreachable_database_raises_write_error(self):
        await self.auth.establish_session()
        blocker = os.path.join(self.temp_dir.name, "blocker")
        with open(blocker, "w") as f:
            f.write("not a directory")
        db_database.configure(os.path.join(blocker, "nested", "test.sqlite"))

        with self.assertRaises(WriteError):
            await self.store.create_document(PRODUCTS, {"name": "Tea"})

    async def test_collections_are_separate(self):
        await self.auth.establish_session()
        await self.store.create_document(PRODUCTS, {"name": "Tea"})
        self.assertEqual(len(await self.store.get_snapshot(ORDERS)), 0)
        self.assertEqual(len(await self.store.get_snapshot(PRODUCTS)), 1)

    # ---------- Subscriptions ----------

    async def test_unauthenticated_subscription_yields_error(self):
        events = [event async for event in self.store.subscribe(PRODUCTS)]
        self.assertEqual(len(events), 1)
        self.assertIsInstance(events[0].error, PermissionDeniedError)

    async def test_subscription_delivers_full_snapshots(self):
        await self.auth.establish_session()
        await self.store.create_document(PRODUCTS, {"name": "Tea", "price": 1.0})

        events = self.store.subscribe(PRODUCTS).__aiter__()
        initial = await events.__anext__()
        self.assertEqual([d.data["name"] for d in initial.snapshot], ["Tea"])

        await self.store.create_document(PRODUCTS, {"name": "Coffee", "price": 4.0})
        update = await asyncio.wait_for(events.__anext__(), timeout=2)
        self.assertTrue(update.ok)
        self.assertEqual([d.data["name"] for d in update.snapshot], ["Tea", "Coffee"])
        await events.aclose()

    async def test_subscription_restarts_from_current_contents(self):
        await self.auth.establish_session()
        subscription = self.store.subscribe(PRODUCTS)

        events = subscription.__aiter__()
        self.assertEqual(len((await events.__anext__()).snapshot), 0)
        await events.aclose()

        await self.store.create_document(PRODUCTS, {"name": "Tea"})
        events = subscription.__aiter__()
        self.assertEqual(len((await events.__anext__()).snapshot), 1)
        await events.aclose()

    async def test_close_ends_subscriptions(self):
        await self.auth.establish_session()

        async def consume():
            return [event async for event in self.store.subscribe(PRODUCTS)]

        task = asyncio.create_task(consume())
        await fakes.wait_for(lambda: self.store._listeners[PRODUCTS])
        await self.store.close()
        events = await asyncio.wait_for(task, timeout=2)
        self.assertEqual(len(events), 1)


if __name__ == "__main__":
    unittest.main()
