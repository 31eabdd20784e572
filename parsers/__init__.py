"""
CraftProbe Parsers Package
"""

from .server_parser import JavaStatusParser, BedrockAdvertisementParser, MOTDParser
from .image_decoder import decode_data_url

__all__ = [
    'JavaStatusParser',
    'BedrockAdvertisementParser',
    'MOTDParser',
    'decode_data_url'
]
