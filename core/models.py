"""
Shared data types for CraftProbe
"""

from datetime import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .exceptions import UnsupportedProtocolError

JAVA_DEFAULT_PORT = 25565
BEDROCK_DEFAULT_PORT = 19132

class ProtocolFamily(Enum):
    """Minecraft server protocol families"""
    JAVA = "java"
    BEDROCK = "bedrock"

    @property
    def default_port(self) -> int:
        return JAVA_DEFAULT_PORT if self is ProtocolFamily.JAVA else BEDROCK_DEFAULT_PORT

    @classmethod
    def from_value(cls, value: Union['ProtocolFamily', str]) -> 'ProtocolFamily':
        """Resolve an enum member from a member, name or value (case-insensitive)"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnsupportedProtocolError(f"Unsupported protocol: {value!r}")

class ServerState(Enum):
    ONLINE = "Online"
    OFFLINE = "Offline"

@dataclass(frozen=True)
class Hostname:
    host: str = "localhost"
    port: Optional[int] = None

@dataclass(frozen=True)
class ProbeOptions:
    """A single probe request, consumed by the dispatcher"""
    protocol: ProtocolFamily
    host: str
    port: Optional[int] = None
    timeout_millis: Optional[int] = None  # Java only

    @classmethod
    def from_hostname(cls, hostname: Hostname, protocol: ProtocolFamily,
                      timeout_millis: Optional[int] = None) -> 'ProbeOptions':
        return cls(
            protocol=protocol,
            host=hostname.host,
            port=hostname.port,
            timeout_millis=timeout_millis
        )

@dataclass(frozen=True)
class RawJavaResponse:
    """Decoded server-list-ping status response"""
    max_players: int
    online_players: int
    version_name: Optional[str] = None
    protocol_version: Optional[int] = None
    player_sample: Tuple[Tuple[str, str], ...] = ()
    description: Union[str, Dict[str, Any], None] = None
    favicon: Optional[str] = None
    latency_millis: Optional[float] = None

@dataclass(frozen=True)
class RawBedrockResponse:
    """Decoded RakNet unconnected pong advertisement"""
    edition: str
    motd: str
    protocol_version: int
    version: str
    players_online: int
    players_max: int
    server_id: Optional[str] = None
    level_name: Optional[str] = None
    gamemode: Optional[str] = None
    gamemode_id: Optional[int] = None
    port_v4: Optional[int] = None
    port_v6: Optional[int] = None

RawResponse = Union[RawJavaResponse, RawBedrockResponse]

@dataclass(frozen=True)
class StatusRecord:
    """Unified server status handed back to callers"""
    state: ServerState
    probed_at: datetime
    max_players: int = 0
    online_players: int = 0
    version: Optional[str] = None
    latency_millis: Optional[float] = None
    motd: Optional[str] = None
    icon: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def offline(cls, probed_at: datetime) -> 'StatusRecord':
        """Canonical record for an unreachable server"""
        return cls(state=ServerState.OFFLINE, probed_at=probed_at)

    @property
    def is_online(self) -> bool:
        return self.state is ServerState.ONLINE
