import asyncio

import pytest

from core.config_types import ProbeConfig
from core.dispatcher import ProbeDispatcher, query
from core.exceptions import UnsupportedProtocolError
from core.models import ProbeOptions, ProtocolFamily, RawJavaResponse, ServerState

class RecordingProbe:
    def __init__(self, result=None):
        self.result = result
        self.calls = []

    async def probe(self, *args):
        self.calls.append(args)
        return self.result

def test_unsupported_protocol_selector():
    dispatcher = ProbeDispatcher()
    with pytest.raises(UnsupportedProtocolError):
        asyncio.run(dispatcher.query(ProbeOptions(protocol="classic", host="localhost")))
    with pytest.raises(UnsupportedProtocolError):
        asyncio.run(dispatcher.query_address("localhost", "pocket"))

@pytest.mark.asyncio
async def test_routes_java_with_timeout():
    java = RecordingProbe(RawJavaResponse(max_players=10, online_players=1, version_name="1.8"))
    bedrock = RecordingProbe()
    dispatcher = ProbeDispatcher(java_probe=java, bedrock_probe=bedrock)

    record = await dispatcher.query_address("Mc.Example.com", "JAVA", timeout_millis=1500)

    assert java.calls == [("mc.example.com", 25565, 1500)]
    assert bedrock.calls == []
    assert record.state is ServerState.ONLINE

@pytest.mark.asyncio
async def test_routes_bedrock_without_timeout():
    java = RecordingProbe()
    bedrock = RecordingProbe()
    dispatcher = ProbeDispatcher(java_probe=java, bedrock_probe=bedrock)

    record = await dispatcher.query(ProbeOptions(ProtocolFamily.BEDROCK, "pe.example.com", 19133, 999))

    assert bedrock.calls == [("pe.example.com", 19133)]
    assert java.calls == []
    assert record.state is ServerState.OFFLINE

@pytest.mark.asyncio
async def test_unreachable_target_is_offline_record(unused_tcp_port):
    record = await query(f"127.0.0.1:{unused_tcp_port}", ProtocolFamily.JAVA, timeout_millis=1000)
    assert record.state is ServerState.OFFLINE
    assert (record.online_players, record.max_players) == (0, 0)
    assert record.version is None
    assert record.latency_millis is None
    assert record.motd is None
    assert record.icon is None

@pytest.mark.asyncio
async def test_unusable_address_is_offline_record():
    dispatcher = ProbeDispatcher(ProbeConfig(bedrock_timeout=0.3))

    assert (await query("a..b", "java", timeout_millis=500)).state is ServerState.OFFLINE
    assert (await dispatcher.query_address("x" * 70 + ".com", "bedrock")).state is ServerState.OFFLINE
    options = ProbeOptions(ProtocolFamily.JAVA, "127.0.0.1", 70000, 500)
    assert (await dispatcher.query(options)).state is ServerState.OFFLINE

@pytest.mark.asyncio
async def test_end_to_end_java(java_server, java_status):
    async with java_server(java_status) as (port, _):
        record = await query(f"127.0.0.1:{port}", "java")

    assert record.is_online
    assert record.motd == "§6A Minecraft Server"
    assert record.icon == b"ABC"
    assert record.latency_millis is not None

@pytest.mark.asyncio
async def test_end_to_end_bedrock(bedrock_server):
    dispatcher = ProbeDispatcher(ProbeConfig(bedrock_timeout=1.0))
    async with bedrock_server() as (port, _):
        record = await dispatcher.query_address(f"127.0.0.1:{port}", ProtocolFamily.BEDROCK)

    assert record.is_online
    assert (record.online_players, record.max_players) == (3, 10)
    assert record.latency_millis is None

@pytest.mark.asyncio
async def test_concurrent_queries_are_independent(java_server, java_status):
    other_status = {
        'version': {'name': 'Paper 1.21', 'protocol': 767},
        'players': {'max': 100, 'online': 42},
        'description': "Other"
    }

    dispatcher = ProbeDispatcher()
    async with java_server(java_status) as (first_port, _), \
            java_server(other_status) as (second_port, _):
        first, second = await asyncio.gather(
            dispatcher.query_address(f"127.0.0.1:{first_port}", ProtocolFamily.JAVA),
            dispatcher.query_address(f"127.0.0.1:{second_port}", ProtocolFamily.JAVA),
        )

    assert (first.version, first.max_players, first.online_players) == ("1.20.4", 20, 3)
    assert first.icon == b"ABC"
    assert (second.version, second.max_players, second.online_players) == ("Paper 1.21", 100, 42)
    assert second.motd == "Other"
    assert second.icon is None
