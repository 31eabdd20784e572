"""
Minecraft Bedrock edition RakNet unconnected ping probe
"""

import asyncio
import struct
import logging
import random
import time
from typing import Optional

from utils.network import Deadline
from .config_types import ProbeConfig
from .exceptions import MalformedResponseError, ProtocolError, UnreachableTargetError
from .models import RawBedrockResponse, BEDROCK_DEFAULT_PORT

logger = logging.getLogger(__name__)

# RakNet offline message id
RAKNET_MAGIC = bytes.fromhex('00ffff00fefefefefdfdfdfd12345678')

UNCONNECTED_PING = 0x01
UNCONNECTED_PONG = 0x1C

# id + timestamp + server guid + magic + string length
PONG_HEADER_SIZE = 1 + 8 + 8 + 16 + 2

class _PongProtocol(asyncio.DatagramProtocol):
    """Sends one ping datagram and resolves with the first reply"""

    def __init__(self, ping: bytes):
        self.ping = ping
        self.response: asyncio.Future = asyncio.get_running_loop().create_future()

    def connection_made(self, transport: asyncio.DatagramTransport) -> None:
        transport.sendto(self.ping)

    def datagram_received(self, data: bytes, addr) -> None:
        if not self.response.done():
            self.response.set_result(data)

    def error_received(self, exc: Exception) -> None:
        if not self.response.done():
            self.response.set_exception(exc)

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if not self.response.done():
            self.response.set_exception(exc or ConnectionError("Endpoint closed"))

class BedrockProbe:
    """Single-shot status query against a Bedrock edition server"""

    def __init__(self, config: Optional[ProbeConfig] = None):
        self.config = config or ProbeConfig()

        # Import here to avoid circular imports
        from parsers.server_parser import BedrockAdvertisementParser
        self.parser = BedrockAdvertisementParser()
        self.client_guid = random.getrandbits(63)

    async def probe(self, host: str, port: Optional[int] = None) -> Optional[RawBedrockResponse]:
        """Query a server, None when it cannot be reached or answers garbage"""
        port = port or BEDROCK_DEFAULT_PORT

        try:
            data = await self._exchange(host, port)
            result = self.parse_pong(data)
            logger.debug(f"Bedrock probe succeeded for {host}:{port}")
            return result
        except (asyncio.TimeoutError, OSError, UnreachableTargetError, ProtocolError) as e:
            logger.debug(f"Bedrock probe failed for {host}:{port}: {e!r}")
            return None

    async def _exchange(self, host: str, port: int) -> bytes:
        loop = asyncio.get_running_loop()
        ping = self.create_ping()
        deadline = Deadline(self.config.bedrock_timeout)

        try:
            transport, protocol = await asyncio.wait_for(
                loop.create_datagram_endpoint(lambda: _PongProtocol(ping), remote_addr=(host, port)),
                timeout=deadline.remaining()
            )
        except (asyncio.TimeoutError, OSError, UnicodeError, ValueError, OverflowError) as e:
            # IDNA rejects empty or overlong labels, connect() rejects ports above 65535
            raise UnreachableTargetError(f"Cannot open endpoint to {host}:{port}: {e!r}")

        try:
            return await asyncio.wait_for(protocol.response, timeout=deadline.remaining())
        finally:
            transport.close()

    def create_ping(self) -> bytes:
        """Build an Unconnected Ping datagram"""
        return (
            bytes([UNCONNECTED_PING])
            + struct.pack('>q', int(time.time() * 1000))
            + RAKNET_MAGIC
            + struct.pack('>q', self.client_guid)
        )

    def parse_pong(self, data: bytes) -> RawBedrockResponse:
        """Decode an Unconnected Pong datagram"""
        if len(data) < PONG_HEADER_SIZE:
            raise MalformedResponseError(f"Pong too short ({len(data)} bytes)")
        if data[0] != UNCONNECTED_PONG:
            raise MalformedResponseError(f"Unexpected packet id {data[0]:#x}")

        magic = data[17:33]
        if magic != RAKNET_MAGIC:
            raise MalformedResponseError("RakNet magic mismatch")

        (length,) = struct.unpack('>H', data[33:35])
        body = data[PONG_HEADER_SIZE:PONG_HEADER_SIZE + length]
        if len(body) != length:
            raise MalformedResponseError("Truncated server advertisement")

        try:
            advertisement = body.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedResponseError(f"Advertisement is not UTF-8: {e}")

        return self.parser.parse(advertisement)
