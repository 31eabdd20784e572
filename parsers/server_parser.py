"""
Server response decoders for Java status JSON and Bedrock advertisements
"""

import json
import re
import logging
from typing import Dict, Any, Optional, List, Tuple

from core.exceptions import MalformedResponseError
from core.models import RawJavaResponse, RawBedrockResponse

logger = logging.getLogger(__name__)

# Legacy section-sign formatting codes
FORMATTING_PATTERN = re.compile(r'§[0-9a-fk-or]', re.IGNORECASE)

class MOTDParser:
    """MOTD helpers for the presentation layer"""

    @staticmethod
    def strip_formatting(text: Optional[str]) -> str:
        """Remove §X color and style codes"""
        if not text:
            return ""
        return FORMATTING_PATTERN.sub('', text)

    @staticmethod
    def has_formatting(text: Optional[str]) -> bool:
        return bool(text and FORMATTING_PATTERN.search(text))

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

class JavaStatusParser:
    """Decode the status response JSON of a Java server"""

    def parse(self, payload: str, latency_millis: Optional[float] = None) -> RawJavaResponse:
        """Parse status JSON text, raising MalformedResponseError on missing fields"""
        try:
            response_data = json.loads(payload)
        except (ValueError, RecursionError) as e:
            raise MalformedResponseError(f"Status response is not valid JSON: {e}")

        if not isinstance(response_data, dict):
            raise MalformedResponseError("Status response is not a JSON object")

        return self.parse_response(response_data, latency_millis)

    def parse_response(self, response_data: Dict[str, Any],
                       latency_millis: Optional[float] = None) -> RawJavaResponse:
        """Map an already decoded status object onto RawJavaResponse"""
        players_info = response_data.get('players')
        if not isinstance(players_info, dict):
            raise MalformedResponseError("Status response has no players field")

        max_players = players_info.get('max')
        online_players = players_info.get('online')
        if not _is_int(max_players) or not _is_int(online_players):
            raise MalformedResponseError("Status response has no player counts")

        # Version is optional, some proxies omit it entirely
        version_name = None
        protocol_version = None
        version_info = response_data.get('version')
        if isinstance(version_info, dict):
            name = version_info.get('name')
            version_name = name if isinstance(name, str) else None
            protocol = version_info.get('protocol')
            protocol_version = protocol if _is_int(protocol) else None

        description = response_data.get('description')
        if not isinstance(description, (str, dict)):
            description = None

        favicon = response_data.get('favicon')
        if not isinstance(favicon, str) or not favicon:
            favicon = None

        return RawJavaResponse(
            max_players=max_players,
            online_players=online_players,
            version_name=version_name,
            protocol_version=protocol_version,
            player_sample=tuple(self._extract_sample(players_info)),
            description=description,
            favicon=favicon,
            latency_millis=latency_millis
        )

    def _extract_sample(self, players_info: Dict[str, Any]) -> List[Tuple[str, str]]:
        """Extract (name, id) pairs from the player sample list"""
        sample = players_info.get('sample')
        if not isinstance(sample, list):
            return []

        players = []
        for player in sample:
            if isinstance(player, dict) and 'id' in player and 'name' in player:
                players.append((str(player['name']), str(player['id'])))
        return players

class BedrockAdvertisementParser:
    """Decode the ';' separated advertisement of an unconnected pong"""

    FIELDS = [
        'edition',
        'motd',
        'protocol_version',
        'version',
        'players_online',
        'players_max',
        'server_id',
        'level_name',
        'gamemode',
        'gamemode_id',
        'port_v4',
        'port_v6',
    ]
    REQUIRED_FIELDS = 6

    def parse(self, advertisement: str) -> RawBedrockResponse:
        parts = advertisement.split(';')
        if len(parts) < self.REQUIRED_FIELDS:
            raise MalformedResponseError(
                f"Advertisement has {len(parts)} fields, expected at least {self.REQUIRED_FIELDS}"
            )

        # Older servers stop after the player counts
        data = dict(zip(self.FIELDS, parts))
        try:
            protocol_version = int(data['protocol_version'])
            players_online = int(data['players_online'])
            players_max = int(data['players_max'])
        except ValueError as e:
            raise MalformedResponseError(f"Advertisement has a non-numeric field: {e}")

        return RawBedrockResponse(
            edition=data['edition'],
            motd=data['motd'],
            protocol_version=protocol_version,
            version=data['version'],
            players_online=players_online,
            players_max=players_max,
            server_id=data.get('server_id') or None,
            level_name=data.get('level_name') or None,
            gamemode=data.get('gamemode') or None,
            gamemode_id=self._optional_int(data.get('gamemode_id')),
            port_v4=self._optional_int(data.get('port_v4')),
            port_v6=self._optional_int(data.get('port_v6'))
        )

    @staticmethod
    def _optional_int(value: Optional[str]) -> Optional[int]:
        if not value:
            return None
        try:
            return int(value)
        except ValueError:
            logger.debug(f"Ignoring non-numeric advertisement field: {value!r}")
            return None
