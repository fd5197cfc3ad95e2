"""loomgate - gateway bind retry and provider replay sanitation."""

from loomgate.errors import ConfigurationError, GatewayLockError, LoomgateError
from loomgate.gateway import SocketListener, bind_with_retry, listen_gateway_server
from loomgate.replay import parse_reasoning_signature, sanitize_replay

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "GatewayLockError",
    "LoomgateError",
    "SocketListener",
    "bind_with_retry",
    "listen_gateway_server",
    "parse_reasoning_signature",
    "sanitize_replay",
]
