"""Gateway socket bind with backoff for supervised restarts."""

from __future__ import annotations

import asyncio
import errno
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from loomgate.errors import GatewayLockError

# A previous process may still be releasing the socket after a force-exit,
# so EADDRINUSE is expected to clear within seconds.
DEFAULT_MAX_RETRIES = 5
DEFAULT_BASE_DELAY = 0.5


class Listener(Protocol):
    """Server object that can start listening on an address."""

    async def listen(self, host: str, port: int) -> None: ...


@dataclass(frozen=True)
class BindTarget:
    """Address one bind attempt is made against."""

    host: str
    port: int

    def __post_init__(self) -> None:
        # Port 0 asks the OS for an ephemeral port.
        if not 0 <= self.port <= 65535:
            raise ValueError(f"port out of range: {self.port}")

    @property
    def endpoint(self) -> str:
        return f"ws://{self.host}:{self.port}"


@dataclass(frozen=True)
class Bound:
    """The listener is bound and serving."""

    attempts: int


@dataclass(frozen=True)
class TransientFailure:
    """Still seeing EADDRINUSE after the retry budget ran out."""

    cause: OSError
    attempts: int


@dataclass(frozen=True)
class FatalFailure:
    """A bind error that retrying cannot clear."""

    cause: OSError
    attempts: int


type BindOutcome = Bound | TransientFailure | FatalFailure


def is_address_in_use(exc: BaseException) -> bool:
    return isinstance(exc, OSError) and exc.errno == errno.EADDRINUSE


def backoff_delay(base_delay: float, attempt: int) -> float:
    """Delay before retry number ``attempt + 1`` (``attempt`` is zero-indexed)."""

    return base_delay * 2**attempt


async def bind_with_retry(
    listener: Listener,
    target: BindTarget,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> BindOutcome:
    """Bind ``listener`` to ``target``, retrying only on EADDRINUSE.

    Makes at most ``max_retries + 1`` attempts. Waits between attempts are
    awaited so other tasks on the loop keep running.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")
    if base_delay < 0:
        raise ValueError("base_delay must be >= 0")

    attempt = 0
    while True:
        try:
            await listener.listen(target.host, target.port)
        except OSError as exc:
            if not is_address_in_use(exc):
                logger.debug("gateway.listen.failed endpoint={} error={}", target.endpoint, exc)
                return FatalFailure(cause=exc, attempts=attempt + 1)
            if attempt >= max_retries:
                return TransientFailure(cause=exc, attempts=attempt + 1)
            delay = backoff_delay(base_delay, attempt)
            logger.warning(
                "gateway.listen.retry port={} in use, retrying in {}ms (attempt {}/{})",
                target.port,
                round(delay * 1000),
                attempt + 1,
                max_retries,
            )
            await sleep(delay)
            attempt += 1
            continue
        if attempt:
            logger.info("gateway.listen.bound endpoint={} after {} retries", target.endpoint, attempt)
        return Bound(attempts=attempt + 1)


def lock_error_for(target: BindTarget, outcome: TransientFailure | FatalFailure) -> GatewayLockError:
    if isinstance(outcome, TransientFailure):
        return GatewayLockError(
            f"another gateway instance is already listening on {target.endpoint}",
            endpoint=target.endpoint,
            cause=outcome.cause,
            is_conflict=True,
        )
    return GatewayLockError(
        f"failed to bind gateway socket on {target.endpoint}: {outcome.cause}",
        endpoint=target.endpoint,
        cause=outcome.cause,
    )


async def listen_gateway_server(
    listener: Listener,
    *,
    host: str,
    port: int,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
) -> None:
    """Start ``listener`` on ``host:port`` or raise ``GatewayLockError``."""

    target = BindTarget(host=host, port=port)
    outcome = await bind_with_retry(listener, target, max_retries=max_retries, base_delay=base_delay)
    if isinstance(outcome, Bound):
        return
    raise lock_error_for(target, outcome) from outcome.cause
