# dataclass models shared across the document store boundary

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass(frozen=True, order=True)
class Timestamp:
    """Ordering token assigned by the store when a write commits."""

    seconds: int
    nanos: int = 0

    @classmethod
    def from_ns(cls, ns: int) -> "Timestamp":
        return cls(seconds=ns // 1_000_000_000, nanos=ns % 1_000_000_000)

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.seconds, tz=timezone.utc).replace(
            microsecond=self.nanos // 1000
        )


class _ServerTimestamp:
    """Placeholder field value, replaced by a Timestamp at commit time."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


def server_timestamp() -> _ServerTimestamp:
    return SERVER_TIMESTAMP


@dataclass(frozen=True)
class DocumentSnapshot:
    id: str
    data: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """Store-assigned key merged with the field payload."""
        return {"id": self.id, **self.data}


@dataclass(frozen=True)
class Snapshot:
    """Complete contents of one collection at one point in time."""

    path: str
    docs: Tuple[DocumentSnapshot, ...] = ()

    def __iter__(self) -> Iterator[DocumentSnapshot]:
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)


@dataclass(frozen=True)
class SnapshotEvent:
    """One delivery of a subscription: either a snapshot or an error."""

    snapshot: Optional[Snapshot] = None
    error: Optional[Exception] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Identity:
    uid: str
    anonymous: bool = True
