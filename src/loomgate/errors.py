"""Application-level exception types for loomgate."""

from __future__ import annotations


class LoomgateError(Exception):
    """Base exception for loomgate."""


class ConfigurationError(LoomgateError):
    """Raised when settings fail validation at startup."""


class GatewayLockError(LoomgateError):
    """Raised when the gateway socket cannot be bound.

    ``is_conflict`` is true when another live instance still holds the endpoint
    after the retry budget ran out, as opposed to an unrecoverable bind error.
    """

    def __init__(
        self,
        message: str,
        *,
        endpoint: str,
        cause: BaseException | None = None,
        is_conflict: bool = False,
    ) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.cause = cause
        self.is_conflict = is_conflict
