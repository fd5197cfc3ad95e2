"""Gateway listener and bind retry."""

from loomgate.gateway.listen import (
    BindOutcome,
    BindTarget,
    Bound,
    FatalFailure,
    Listener,
    TransientFailure,
    bind_with_retry,
    listen_gateway_server,
)
from loomgate.gateway.server import SocketListener

__all__ = [
    "BindOutcome",
    "BindTarget",
    "Bound",
    "FatalFailure",
    "Listener",
    "SocketListener",
    "TransientFailure",
    "bind_with_retry",
    "listen_gateway_server",
]
