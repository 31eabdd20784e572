import asyncio
import json
import struct
from contextlib import asynccontextmanager
from typing import Callable, Optional

import pytest

from core.bedrock import RAKNET_MAGIC

# "ABC" as a PNG data URL, enough for the decoder
FAVICON = "data:image/png;base64,QUJD"

BEDROCK_ADVERTISEMENT = (
    "MCPE;§aDedicated Server;712;1.21.20;3;10;13253860892328930865;"
    "Bedrock level;Survival;1;19132;19133;"
)

def encode_varint(value: int) -> bytes:
    value &= 0xFFFFFFFF
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            byte |= 0x80
        out.append(byte)
        if not value:
            return bytes(out)

def java_packet(packet_id: int, body: bytes) -> bytes:
    data = encode_varint(packet_id) + body
    return encode_varint(len(data)) + data

async def read_java_packet(reader: asyncio.StreamReader) -> bytes:
    length = 0
    for i in range(5):
        value = (await reader.readexactly(1))[0]
        length |= (value & 0x7F) << (7 * i)
        if not value & 0x80:
            break
    return await reader.readexactly(length)

def bedrock_pong(ping: bytes, advertisement: str = BEDROCK_ADVERTISEMENT,
                 magic: bytes = RAKNET_MAGIC, packet_id: int = 0x1C) -> bytes:
    body = advertisement.encode('utf-8')
    return (
        bytes([packet_id])
        + ping[1:9]
        + struct.pack('>q', 0x1234)
        + magic
        + struct.pack('>H', len(body))
        + body
    )

@asynccontextmanager
async def _java_server(status: Optional[dict] = None, raw_payload: Optional[bytes] = None,
                       answer_pong: bool = True, silent: bool = False):
    """Local TCP server speaking just enough of the status protocol"""
    handshakes = []

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        try:
            handshakes.append(await read_java_packet(reader))
            await read_java_packet(reader)  # status request

            if silent:
                # Never answer, wait for the client to give up
                await reader.read()
                return

            payload = raw_payload if raw_payload is not None else json.dumps(status).encode('utf-8')
            writer.write(java_packet(0x00, encode_varint(len(payload)) + payload))
            await writer.drain()

            if answer_pong:
                ping = await read_java_packet(reader)
                writer.write(java_packet(0x01, ping[1:]))
                await writer.drain()
        except (asyncio.IncompleteReadError, ConnectionError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, '127.0.0.1', 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port, handshakes
    finally:
        server.close()
        await server.wait_closed()

class _BedrockServerProtocol(asyncio.DatagramProtocol):
    def __init__(self, reply: Callable[[bytes], Optional[bytes]]):
        self.reply = reply
        self.pings = []

    def connection_made(self, transport):
        self.transport = transport

    def datagram_received(self, data, addr):
        self.pings.append(data)
        response = self.reply(data)
        if response is not None:
            self.transport.sendto(response, addr)

@asynccontextmanager
async def _bedrock_server(reply: Callable[[bytes], Optional[bytes]] = bedrock_pong):
    """Local UDP endpoint answering unconnected pings"""
    loop = asyncio.get_running_loop()
    transport, protocol = await loop.create_datagram_endpoint(
        lambda: _BedrockServerProtocol(reply), local_addr=('127.0.0.1', 0)
    )
    port = transport.get_extra_info('sockname')[1]
    try:
        yield port, protocol.pings
    finally:
        transport.close()

@pytest.fixture
def java_server():
    return _java_server

@pytest.fixture
def bedrock_server():
    return _bedrock_server

@pytest.fixture
def java_status():
    return {
        'version': {'name': '1.20.4', 'protocol': 765},
        'players': {
            'max': 20,
            'online': 3,
            'sample': [{'name': 'Notch', 'id': '069a79f4-44e9-4726-a5be-fca90e38aaf5'}]
        },
        'description': {'text': '§6A Minecraft Server'},
        'favicon': FAVICON
    }

@pytest.fixture
def make_pong():
    return bedrock_pong
