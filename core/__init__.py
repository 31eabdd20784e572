"""
CraftProbe Core Package
"""

from .models import (
    ProtocolFamily, ServerState, Hostname, ProbeOptions,
    RawJavaResponse, RawBedrockResponse, StatusRecord
)
from .address import parse_address, stringify_address
from .protocol import JavaProbe
from .bedrock import BedrockProbe
from .normalizer import StatusNormalizer
from .dispatcher import ProbeDispatcher, query
from .config import ConfigManager
from .config_types import ProbeConfig
from .exceptions import *

__version__ = "0.1.0"
__author__ = "CraftProbe Team"

__all__ = [
    'ProtocolFamily',
    'ServerState',
    'Hostname',
    'ProbeOptions',
    'RawJavaResponse',
    'RawBedrockResponse',
    'StatusRecord',
    'parse_address',
    'stringify_address',
    'JavaProbe',
    'BedrockProbe',
    'StatusNormalizer',
    'ProbeDispatcher',
    'query',
    'ConfigManager',
    'ProbeConfig',
    'CraftProbeError',
    'ProtocolError',
    'MalformedResponseError',
    'UnreachableTargetError',
    'InvalidEncodingError',
    'UnsupportedProtocolError',
    'ConfigError'
]
