from __future__ import annotations

from typing import Callable, Optional, Protocol

from core.errors import SessionError
from core.models import SessionState
from docstore.models import Identity
from utils.logger import get_logger

_logger = get_logger(__name__)


class IdentitySource(Protocol):
    current_user: Optional[Identity]

    def on_identity_change(self, callback: Callable[[Optional[Identity]], None]): ...

    async def establish_session(self, token: Optional[str] = None) -> Identity: ...


class SessionGate:
    """
    pending -> established, once per app lifetime.

    `on_ready` runs the first time an identity shows up and never again, no
    matter how often the provider repeats itself. A failed sign-in moves the
    gate to FAILED for good and hands the error to `on_failure`.
    """

    def __init__(
        self,
        on_ready: Callable[[Identity], None],
        on_failure: Callable[[SessionError], None],
    ) -> None:
        self.state = SessionState.PENDING
        self.identity: Optional[Identity] = None
        self.error: Optional[SessionError] = None
        self._on_ready = on_ready
        self._on_failure = on_failure
        self._ready_fired = False

    @property
    def established(self) -> bool:
        return self.state is SessionState.ESTABLISHED

    def handle_identity(self, identity: Optional[Identity]) -> None:
        if identity is None or self.state is SessionState.FAILED:
            return

        self.identity = identity
        self.state = SessionState.ESTABLISHED
        if not self._ready_fired:
            self._ready_fired = True
            _logger.info(f"Session established for {identity.uid}")
            self._on_ready(identity)

    async def start(self, provider: IdentitySource, token: Optional[str] = None) -> None:
        provider.on_identity_change(self.handle_identity)
        if provider.current_user is not None:
            return

        try:
            await provider.establish_session(token)
        except SessionError as exc:
            self._fail(exc)
        except Exception as exc:
            self._fail(SessionError(str(exc) or exc.__class__.__name__))

    def _fail(self, error: SessionError) -> None:
        _logger.error(f"Authentication failed: {error}")
        self.state = SessionState.FAILED
        self.error = error
        self._on_failure(error)
