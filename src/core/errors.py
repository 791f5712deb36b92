"""Error taxonomy of the storefront.

Every failure of an external call is converted into one of these at the call
site that issued it, then surfaced to the user:

- SessionError: fatal for the lifetime of the app, blocking screen, no retry
- SubscriptionError: inline message in place of the view's loading indicator
- WriteError: transient alert, caller state left untouched for a manual retry
- ValidationError: warning alert, never propagated
"""


class StorefrontError(Exception):
    """Base error with a user-safe message."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class SessionError(StorefrontError):
    """No authenticated identity could be established."""


class AuthenticationError(SessionError):
    """Raised by the identity provider when sign-in is rejected."""


class SubscriptionError(StorefrontError):
    """A live collection feed failed."""


class WriteError(StorefrontError):
    """A document could not be written."""


class PermissionDeniedError(SubscriptionError, WriteError):
    """The document store refused an unauthenticated read or write."""


class ValidationError(StorefrontError):
    """User input or local state does not allow the requested action."""
