"""
Maps protocol-native responses onto the unified StatusRecord
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .exceptions import UnsupportedProtocolError
from .models import (
    ProtocolFamily, RawBedrockResponse, RawJavaResponse, RawResponse,
    ServerState, StatusRecord
)

logger = logging.getLogger(__name__)

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def determine_state(max_players: int, version: Optional[str]) -> ServerState:
    """
    Online iff the server reports a nonzero capacity and its version string
    does not mention "offline".
    """
    if max_players and 'offline' not in (version or '').lower():
        return ServerState.ONLINE
    return ServerState.OFFLINE

class StatusNormalizer:
    """Normalizes raw probe results, converting failures to the offline record"""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

        # Import here to avoid circular imports
        from parsers.image_decoder import decode_data_url
        self.decode_icon = decode_data_url

    def normalize(self, raw: Optional[RawResponse], protocol: ProtocolFamily) -> StatusRecord:
        probed_at = self.clock()

        if not isinstance(protocol, ProtocolFamily):
            raise UnsupportedProtocolError(f"Unsupported protocol: {protocol!r}")
        if raw is None:
            return StatusRecord.offline(probed_at)

        if protocol is ProtocolFamily.JAVA:
            return self._normalize_java(raw, probed_at)
        return self._normalize_bedrock(raw, probed_at)

    def _normalize_java(self, raw: RawJavaResponse, probed_at: datetime) -> StatusRecord:
        if isinstance(raw.description, str):
            motd = raw.description
        elif isinstance(raw.description, dict):
            text = raw.description.get('text')
            motd = text if isinstance(text, str) and text else None
        else:
            motd = None

        return StatusRecord(
            state=determine_state(raw.max_players, raw.version_name),
            probed_at=probed_at,
            max_players=raw.max_players,
            online_players=raw.online_players,
            version=raw.version_name,
            latency_millis=raw.latency_millis,
            motd=motd,
            icon=self.decode_icon(raw.favicon) if raw.favicon else None
        )

    def _normalize_bedrock(self, raw: RawBedrockResponse, probed_at: datetime) -> StatusRecord:
        return StatusRecord(
            state=determine_state(raw.players_max, raw.version),
            probed_at=probed_at,
            max_players=raw.players_max,
            online_players=raw.players_online,
            version=raw.version,
            motd=raw.motd or None
        )
