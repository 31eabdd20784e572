"""
Server address parsing and formatting
"""

from typing import Optional

from utils.network import NetworkUtils
from .models import Hostname, ProtocolFamily

def parse_address(raw: str, protocol: Optional[ProtocolFamily] = None) -> Hostname:
    """
    Parse a "host[:port]" string into a Hostname.

    The host is lower-cased and defaults to "localhost". A missing or unusable
    port falls back to the protocol's default port, or stays None when no
    protocol is given. Never raises.
    """
    parts = (raw or "").strip().lower().split(':')
    host = parts[0] or "localhost"

    port = NetworkUtils.parse_port(parts[1]) if len(parts) > 1 else None
    if port is None and protocol is not None:
        port = protocol.default_port

    return Hostname(host=host, port=port)

def stringify_address(hostname: Hostname) -> str:
    """Format a Hostname back into "host:port", or "host" when no port is set"""
    if hostname.port:
        return f"{hostname.host}:{hostname.port}"
    return hostname.host
