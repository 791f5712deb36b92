# local document store with live, full-snapshot subscriptions
from __future__ import annotations

import asyncio
import json
import time
from collections import defaultdict
from typing import Any, AsyncIterator, Dict, List, Optional

import aiosqlite

from core.errors import PermissionDeniedError, SubscriptionError, WriteError
from docstore.database import connect, generate_id
from docstore.identity import IdentityProvider
from docstore.models import (
    SERVER_TIMESTAMP,
    DocumentSnapshot,
    Snapshot,
    SnapshotEvent,
    Timestamp,
)
from utils.logger import get_logger

_logger = get_logger(__name__)

_TIMESTAMP_KEY = "__timestamp__"
_PERMISSION_DENIED = "Missing or insufficient permissions."


def _encode(value: Any) -> Any:
    if isinstance(value, Timestamp):
        return {_TIMESTAMP_KEY: [value.seconds, value.nanos]}
    raise TypeError(f"Object of type {type(value).__name__} is not storable")


def _decode(obj: Dict[str, Any]) -> Any:
    if set(obj) == {_TIMESTAMP_KEY}:
        seconds, nanos = obj[_TIMESTAMP_KEY]
        return Timestamp(seconds, nanos)
    return obj


def _resolve_sentinels(value: Any, stamp: Timestamp) -> Any:
    if value is SERVER_TIMESTAMP:
        return stamp
    if isinstance(value, dict):
        return {k: _resolve_sentinels(v, stamp) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_resolve_sentinels(v, stamp) for v in value]
    return value


class Subscription:
    """
    Handle on the live feed of one collection.

    Iterating yields the current snapshot first, then a new full snapshot after
    every committed write. Every iteration starts over from the current
    contents, so a handle can be consumed again after its loop ended.
    """

    def __init__(self, store: "DocumentStore", path: str) -> None:
        self.store = store
        self.path = path

    def __aiter__(self) -> AsyncIterator[SnapshotEvent]:
        return self._events()

    async def _events(self) -> AsyncIterator[SnapshotEvent]:
        if self.store.auth.current_user is None:
            _logger.warning(f"Unauthenticated subscription to {self.path} refused")
            yield SnapshotEvent(error=PermissionDeniedError(_PERMISSION_DENIED))
            return

        # registered before the first read so no write can slip in between
        queue: asyncio.Queue = asyncio.Queue()
        self.store._listeners[self.path].append(queue)
        try:
            yield await self.store._snapshot_event(self.path)
            while True:
                event = await queue.get()
                if event is None:
                    return
                yield event
        finally:
            self.store._listeners[self.path].remove(queue)


class DocumentStore:
    """
    Collections of JSON documents in sqlite, keyed by path.

    Reads and writes require a signed-in identity on the attached provider.
    """

    def __init__(self, auth: IdentityProvider) -> None:
        self.auth = auth
        self._listeners: Dict[str, List[asyncio.Queue]] = defaultdict(list)
        self._write_lock = asyncio.Lock()
        self._last_ns = 0

    def subscribe(self, path: str) -> Subscription:
        return Subscription(self, path)

    async def get_snapshot(self, path: str) -> Snapshot:
        async with connect() as conn:
            cur = await conn.execute(
                "SELECT doc_id, data FROM documents WHERE collection = ? ORDER BY seq;",
                (path,),
            )
            rows = await cur.fetchall()
            await cur.close()
        docs = tuple(
            DocumentSnapshot(id=row["doc_id"], data=json.loads(row["data"], object_hook=_decode))
            for row in rows
        )
        return Snapshot(path=path, docs=docs)

    async def create_document(self, path: str, fields: Dict[str, Any]) -> str:
        """
        Add a document to a collection and return its store-assigned id.

        SERVER_TIMESTAMP values anywhere in `fields` are replaced by the commit
        timestamp. Raises WriteError if nothing was written.
        """
        if self.auth.current_user is None:
            raise PermissionDeniedError(_PERMISSION_DENIED)

        async with self._write_lock:
            doc_id = generate_id()
            payload = _resolve_sentinels(fields, self._next_timestamp())
            try:
                data = json.dumps(payload, default=_encode, allow_nan=False)
                async with connect() as conn:
                    cur = await conn.execute(
                        "SELECT COALESCE(MAX(seq), 0) + 1 FROM documents WHERE collection = ?;",
                        (path,),
                    )
                    row = await cur.fetchone()
                    await cur.close()
                    await conn.execute(
                        "INSERT INTO documents(collection, doc_id, seq, data) VALUES (?, ?, ?, ?);",
                        (path, doc_id, row[0], data),
                    )
                    await conn.commit()
            except (aiosqlite.Error, OSError, TypeError, ValueError) as exc:
                _logger.error(f"Write to {path} failed: {exc}")
                raise WriteError(f"Could not write to {path}: {exc}") from exc

            _logger.debug(f"Created {path}/{doc_id}")
            await self._fan_out(path)
        return doc_id

    async def close(self) -> None:
        """End every open subscription."""
        for queues in self._listeners.values():
            for queue in list(queues):
                queue.put_nowait(None)

    def _next_timestamp(self) -> Timestamp:
        self._last_ns = max(time.time_ns(), self._last_ns + 1)
        return Timestamp.from_ns(self._last_ns)

    async def _snapshot_event(self, path: str) -> SnapshotEvent:
        try:
            return SnapshotEvent(snapshot=await self.get_snapshot(path))
        except (aiosqlite.Error, OSError, ValueError) as exc:
            _logger.error(f"Reading {path} failed: {exc}")
            return SnapshotEvent(error=SubscriptionError(f"Could not read {path}: {exc}"))

    async def _fan_out(self, path: str) -> None:
        queues: Optional[List[asyncio.Queue]] = self._listeners.get(path)
        if not queues:
            return
        event = await self._snapshot_event(path)
        for queue in list(queues):
            queue.put_nowait(event)
