import json

import pytest

from core.exceptions import MalformedResponseError
from parsers.server_parser import BedrockAdvertisementParser, JavaStatusParser, MOTDParser

def test_java_status_fields(java_status):
    raw = JavaStatusParser().parse(json.dumps(java_status), latency_millis=12.5)
    assert raw.max_players == 20
    assert raw.online_players == 3
    assert raw.version_name == "1.20.4"
    assert raw.protocol_version == 765
    assert raw.player_sample == (("Notch", "069a79f4-44e9-4726-a5be-fca90e38aaf5"),)
    assert raw.description == {'text': '§6A Minecraft Server'}
    assert raw.favicon.startswith("data:image/png")
    assert raw.latency_millis == 12.5

def test_java_status_optional_fields_missing():
    raw = JavaStatusParser().parse_response({'players': {'max': 5, 'online': 0}})
    assert raw.version_name is None
    assert raw.description is None
    assert raw.favicon is None
    assert raw.player_sample == ()

@pytest.mark.parametrize("payload", [
    {'version': {'name': '1.20.4'}},
    {'players': 'lots'},
    {'players': {'online': 1}},
    {'players': {'max': '20', 'online': 1}},
    {'players': {'max': True, 'online': 1}},
])
def test_java_status_without_player_counts(payload):
    with pytest.raises(MalformedResponseError):
        JavaStatusParser().parse_response(payload)

@pytest.mark.parametrize("text", ["not json", "[1, 2]", ""])
def test_java_status_not_an_object(text):
    with pytest.raises(MalformedResponseError):
        JavaStatusParser().parse(text)

def test_java_status_nested_too_deep():
    with pytest.raises(MalformedResponseError):
        JavaStatusParser().parse('{"players":' + '[' * 200000)

def test_bedrock_advertisement():
    raw = BedrockAdvertisementParser().parse(
        "MCPE;My Server;712;1.21.20;3;10;1325386;Bedrock level;Survival;1;19132;19133;"
    )
    assert raw.edition == "MCPE"
    assert raw.motd == "My Server"
    assert raw.protocol_version == 712
    assert raw.version == "1.21.20"
    assert raw.players_online == 3
    assert raw.players_max == 10
    assert raw.level_name == "Bedrock level"
    assert raw.gamemode == "Survival"
    assert raw.gamemode_id == 1
    assert raw.port_v4 == 19132
    assert raw.port_v6 == 19133

def test_bedrock_advertisement_from_older_server():
    raw = BedrockAdvertisementParser().parse("MCPE;Old;100;0.15.0;1;8")
    assert raw.players_max == 8
    assert raw.server_id is None
    assert raw.gamemode is None
    assert raw.port_v4 is None

@pytest.mark.parametrize("advertisement", ["MCPE;Short;1;1.0", "MCPE;Bad;x;1.0;1;2"])
def test_bedrock_advertisement_malformed(advertisement):
    with pytest.raises(MalformedResponseError):
        BedrockAdvertisementParser().parse(advertisement)

def test_motd_strip_formatting():
    assert MOTDParser.strip_formatting("§aHello §LWorld§r!") == "Hello World!"
    assert MOTDParser.strip_formatting(None) == ""
    assert MOTDParser.has_formatting("§6Gold")
    assert not MOTDParser.has_formatting("plain")
