"""
Minecraft Java edition server-list-ping probe
"""

import asyncio
import struct
import logging
import time
from typing import Optional, Tuple

from utils.network import Deadline, Stopwatch
from .config_types import ProbeConfig
from .exceptions import ProtocolError, UnreachableTargetError
from .models import RawJavaResponse, JAVA_DEFAULT_PORT

logger = logging.getLogger(__name__)

class JavaProbe:
    """Single-shot status query against a Java edition server"""

    # Packet constants
    HANDSHAKE_PACKET = 0x00
    STATUS_REQUEST_PACKET = 0x00
    STATUS_RESPONSE_PACKET = 0x00
    PING_PACKET = 0x01
    PONG_PACKET = 0x01

    # States
    STATE_STATUS = 1

    MAX_VARINT_BYTES = 5

    def __init__(self, config: Optional[ProbeConfig] = None):
        self.config = config or ProbeConfig()

        # Import here to avoid circular imports
        from parsers.server_parser import JavaStatusParser
        self.parser = JavaStatusParser()

    async def probe(self, host: str, port: Optional[int] = None,
                    timeout_millis: Optional[int] = None) -> Optional[RawJavaResponse]:
        """Query a server, None when it cannot be reached or answers garbage"""
        port = port or JAVA_DEFAULT_PORT
        timeout = timeout_millis / 1000 if timeout_millis else self.config.java_timeout

        try:
            result = await self._status_exchange(host, port, Deadline(timeout))
            logger.debug(f"Java probe succeeded for {host}:{port}")
            return result
        except (asyncio.TimeoutError, OSError, UnreachableTargetError, ProtocolError) as e:
            logger.debug(f"Java probe failed for {host}:{port}: {e!r}")
            return None

    async def _status_exchange(self, host: str, port: int, deadline: Deadline) -> RawJavaResponse:
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port),
                timeout=deadline.remaining()
            )
        except (asyncio.TimeoutError, OSError, UnicodeError, ValueError, OverflowError) as e:
            # IDNA rejects empty or overlong labels, connect() rejects ports above 65535
            raise UnreachableTargetError(f"Cannot connect to {host}:{port}: {e!r}")

        try:
            # Send handshake followed by status request
            writer.write(self._create_handshake_packet(host, port))
            writer.write(self._create_packet(self.STATUS_REQUEST_PACKET, b''))
            await asyncio.wait_for(writer.drain(), timeout=deadline.remaining())

            packet_id, data = await asyncio.wait_for(
                self._read_packet(reader), timeout=deadline.remaining()
            )
            if packet_id != self.STATUS_RESPONSE_PACKET:
                raise ProtocolError(f"Unexpected packet id {packet_id:#x} for status response")

            payload, _ = self._decode_string(data)
            latency = await self._measure_latency(reader, writer, deadline)

            return self.parser.parse(payload, latency_millis=latency)

        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"Error closing connection to {host}:{port}: {e!r}")

    async def _measure_latency(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter,
                               deadline: Deadline) -> Optional[float]:
        """Ping/pong round trip in milliseconds, None if the server skips the pong"""
        token = int(time.time() * 1000)
        stopwatch = Stopwatch()

        try:
            writer.write(self._create_packet(self.PING_PACKET, struct.pack('>q', token)))
            await asyncio.wait_for(writer.drain(), timeout=deadline.remaining())

            packet_id, data = await asyncio.wait_for(
                self._read_packet(reader), timeout=deadline.remaining()
            )
        except (asyncio.TimeoutError, OSError, ProtocolError) as e:
            logger.debug(f"No pong received, latency unavailable: {e!r}")
            return None

        if packet_id != self.PONG_PACKET or data[:8] != struct.pack('>q', token):
            logger.debug(f"Unexpected pong packet {packet_id:#x}, latency unavailable")
            return None

        return round(stopwatch.elapsed_ms, 2)

    def _create_handshake_packet(self, host: str, port: int) -> bytes:
        """Create handshake packet announcing the status state"""
        # Encode server address
        addr_bytes = host.encode('utf-8')
        addr_len = self._encode_varint(len(addr_bytes))

        protocol = self._encode_varint(self.config.protocol_version)
        port_bytes = struct.pack('>H', port)
        next_state = self._encode_varint(self.STATE_STATUS)

        data = protocol + addr_len + addr_bytes + port_bytes + next_state
        return self._create_packet(self.HANDSHAKE_PACKET, data)

    def _create_packet(self, packet_id: int, data: bytes) -> bytes:
        """Create a packet with ID and data"""
        packet_id_bytes = self._encode_varint(packet_id)
        packet_data = packet_id_bytes + data
        packet_length = self._encode_varint(len(packet_data))
        return packet_length + packet_data

    async def _read_packet(self, reader: asyncio.StreamReader) -> Tuple[int, bytes]:
        """Read one length-prefixed packet, returning (packet id, body)"""
        try:
            length = await self._read_varint(reader)
            if length <= 0:
                raise ProtocolError(f"Invalid packet length {length}")
            data = await reader.readexactly(length)
        except asyncio.IncompleteReadError as e:
            raise ProtocolError(f"Connection closed mid-packet: {e!r}")

        packet_id, offset = self._decode_varint(data)
        return packet_id, data[offset:]

    async def _read_varint(self, reader: asyncio.StreamReader) -> int:
        result = 0
        for i in range(self.MAX_VARINT_BYTES):
            value = (await reader.readexactly(1))[0]
            result |= (value & 0x7F) << (7 * i)
            if not value & 0x80:
                return result
        raise ProtocolError("VarInt too big")

    def _decode_varint(self, data: bytes, offset: int = 0) -> Tuple[int, int]:
        """Decode a VarInt from a buffer, returning (value, next offset)"""
        result = 0
        for i in range(self.MAX_VARINT_BYTES):
            if offset >= len(data):
                raise ProtocolError("Truncated VarInt")
            value = data[offset]
            offset += 1
            result |= (value & 0x7F) << (7 * i)
            if not value & 0x80:
                return result, offset
        raise ProtocolError("VarInt too big")

    def _decode_string(self, data: bytes, offset: int = 0) -> Tuple[str, int]:
        """Decode a VarInt-prefixed UTF-8 string"""
        length, offset = self._decode_varint(data, offset)
        end = offset + length
        if end > len(data):
            raise ProtocolError("Truncated string")
        try:
            return data[offset:end].decode('utf-8'), end
        except UnicodeDecodeError as e:
            raise ProtocolError(f"Invalid UTF-8 string: {e}")

    def _encode_varint(self, value: int) -> bytes:
        """Encode an integer as a VarInt"""
        value &= 0xFFFFFFFF  # negative values use two's complement
        result = bytearray()
        while True:
            byte = value & 0x7F
            value >>= 7
            if value:
                byte |= 0x80
            result.append(byte)
            if not value:
                break
        return bytes(result)
