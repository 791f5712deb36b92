import unittest

from fakes import feed, order_doc, snapshot

from core.errors import PermissionDeniedError, SubscriptionError
from core.mirror import CatalogMirror, OrderMirror
from docstore.models import SnapshotEvent

PRODUCTS = "artifacts/test/public/data/products"
ORDERS = "artifacts/test/public/data/orders"


class CatalogMirrorTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.renders = []
        self.errors = []
        self.mirror = CatalogMirror(on_render=self.renders.append, on_error=self.errors.append)

    async def test_every_snapshot_replaces_contents(self):
        first = snapshot(
            PRODUCTS,
            ("p1", {"name": "Apple", "price": 1.25, "image": "a.png", "description": "red"}),
            ("p2", {"name": "Pear", "price": 2, "image": "p.png", "description": ""}),
        )
        second = snapshot(PRODUCTS, ("p2", {"name": "Pear", "price": 2.5, "image": "p.png"}))

        await self.mirror.run(feed(SnapshotEvent(snapshot=first), SnapshotEvent(snapshot=second)))

        self.assertEqual(len(self.renders), 2)
        self.assertEqual([p.id for p in self.renders[0]], ["p1", "p2"])
        self.assertEqual([p.id for p in self.mirror.items], ["p2"])
        self.assertEqual(self.mirror.get("p2").price, 2.5)
        self.assertIsNone(self.mirror.get("p1"))
        self.assertTrue(self.mirror.loaded)

    async def test_error_keeps_last_snapshot_and_reports(self):
        good = snapshot(PRODUCTS, ("p1", {"name": "Apple", "price": 1}))
        await self.mirror.run(
            feed(
                SnapshotEvent(snapshot=good),
                SnapshotEvent(error=PermissionDeniedError("denied")),
            )
        )
        self.assertEqual(len(self.errors), 1)
        self.assertIsInstance(self.mirror.error, SubscriptionError)
        self.assertEqual([p.id for p in self.mirror.items], ["p1"])

    async def test_foreign_errors_are_wrapped(self):
        self.mirror.apply(SnapshotEvent(error=RuntimeError("boom")))
        self.assertIsInstance(self.errors[0], SubscriptionError)
        self.assertFalse(self.mirror.loaded)
        self.assertEqual(self.renders, [])

    async def test_snapshot_after_error_clears_it(self):
        self.mirror.apply(SnapshotEvent(error=SubscriptionError("offline")))
        self.mirror.apply(SnapshotEvent(snapshot=snapshot(PRODUCTS)))
        self.assertIsNone(self.mirror.error)
        self.assertEqual(self.renders, [[]])

    def test_malformed_documents_are_skipped(self):
        self.mirror.apply(
            SnapshotEvent(
                snapshot=snapshot(
                    PRODUCTS,
                    ("bad", {"name": "Broken", "price": "free"}),
                    ("ok", {"name": "Milk", "price": 0.99}),
                )
            )
        )
        self.assertEqual([p.id for p in self.mirror.items], ["ok"])


class OrderMirrorTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.mirror = OrderMirror()

    def test_newest_first_and_unstamped_last(self):
        self.mirror.apply(
            SnapshotEvent(
                snapshot=snapshot(
                    ORDERS,
                    ("t2", order_doc("second", ts=200)),
                    ("missing", order_doc("pending")),
                    ("t1", order_doc("first", ts=100)),
                )
            )
        )
        self.assertEqual([o.id for o in self.mirror.items], ["t2", "t1", "missing"])

    def test_unstamped_orders_keep_arrival_order(self):
        self.mirror.apply(
            SnapshotEvent(
                snapshot=snapshot(
                    ORDERS,
                    ("m1", order_doc("a")),
                    ("t1", order_doc("b", ts=5)),
                    ("m2", order_doc("c")),
                    ("m3", order_doc("d")),
                )
            )
        )
        self.assertEqual([o.id for o in self.mirror.items], ["t1", "m1", "m2", "m3"])

    def test_orders_materialize_customer_and_items(self):
        self.mirror.apply(SnapshotEvent(snapshot=snapshot(ORDERS, ("o1", order_doc("Ann", ts=1)))))
        order = self.mirror.items[0]
        self.assertEqual(order.customer.name, "Ann")
        self.assertEqual(order.items[0].quantity, 2)
        self.assertEqual(order.total, 3.0)
        self.assertEqual(order.payment_method, "Cash on Delivery")

    async def test_malformed_orders_do_not_stop_the_feed(self):
        first = snapshot(
            ORDERS,
            ("bad-customer", {"customer": "x"}),
            ("bad-items", {**order_doc("Bob", ts=3), "items": ["Tea"]}),
            ("o1", order_doc("Ann", ts=1)),
        )
        second = snapshot(ORDERS, ("o1", order_doc("Ann", ts=1)), ("o2", order_doc("Cy", ts=2)))

        await self.mirror.run(feed(SnapshotEvent(snapshot=first), SnapshotEvent(snapshot=second)))

        self.assertTrue(self.mirror.loaded)
        self.assertIsNone(self.mirror.error)
        self.assertEqual([o.id for o in self.mirror.items], ["o2", "o1"])

    def test_malformed_order_is_skipped_within_its_snapshot(self):
        self.mirror.apply(
            SnapshotEvent(
                snapshot=snapshot(ORDERS, ("bad", {"customer": "x"}), ("o1", order_doc("Ann")))
            )
        )
        self.assertEqual([o.id for o in self.mirror.items], ["o1"])


if __name__ == "__main__":
    unittest.main()
