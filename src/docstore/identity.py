# anonymous and custom-token sign-in against the local store
from __future__ import annotations

import secrets
from datetime import datetime
from typing import Callable, List, Optional

import aiosqlite

from core.errors import AuthenticationError
from docstore.database import connect, generate_id
from docstore.models import Identity
from utils.logger import get_logger

_logger = get_logger(__name__)

IdentityCallback = Callable[[Optional[Identity]], None]


class IdentityProvider:
    """
    Issues identities and tells listeners whenever the signed-in one changes.
    """

    def __init__(self) -> None:
        self.current_user: Optional[Identity] = None
        self._callbacks: List[IdentityCallback] = []

    def on_identity_change(self, callback: IdentityCallback) -> Callable[[], None]:
        """Register `callback`; it fires right away with the current user.

        Returns a function that unregisters it.
        """
        self._callbacks.append(callback)
        callback(self.current_user)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def establish_session(self, token: Optional[str] = None) -> Identity:
        """Sign in with a custom token, or anonymously when no token is given."""
        try:
            if token:
                identity = await self._sign_in_with_token(token)
            else:
                identity = await self._sign_in_anonymously()
        except aiosqlite.Error as exc:
            _logger.error(f"Sign-in failed: {exc}")
            raise AuthenticationError(f"Sign-in failed: {exc}") from exc

        _logger.info(f"Signed in as {identity.uid}")
        self._set_user(identity)
        return identity

    async def refresh(self) -> None:
        """Token refresh: listeners hear about the same identity again."""
        if self.current_user is not None:
            self._notify()

    async def create_custom_token(self) -> str:
        """Register a non-anonymous identity and return the token that signs it in."""
        token = secrets.token_urlsafe(24)
        async with connect() as conn:
            await conn.execute(
                "INSERT INTO identities(uid, token, anonymous, created_at) VALUES (?, ?, 0, ?);",
                (generate_id(28), token, datetime.now().isoformat()),
            )
            await conn.commit()
        return token

    async def _sign_in_with_token(self, token: str) -> Identity:
        async with connect() as conn:
            cur = await conn.execute(
                "SELECT uid FROM identities WHERE token = ?;", (token,)
            )
            row = await cur.fetchone()
            await cur.close()
        if not row:
            raise AuthenticationError("The custom token is invalid.")
        return Identity(uid=row["uid"], anonymous=False)

    async def _sign_in_anonymously(self) -> Identity:
        uid = generate_id(28)
        async with connect() as conn:
            await conn.execute(
                "INSERT INTO identities(uid, token, anonymous, created_at) VALUES (?, NULL, 1, ?);",
                (uid, datetime.now().isoformat()),
            )
            await conn.commit()
        return Identity(uid=uid, anonymous=True)

    def _set_user(self, identity: Optional[Identity]) -> None:
        self.current_user = identity
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._callbacks):
            callback(self.current_user)
