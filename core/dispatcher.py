"""
Public entry point routing status queries to the protocol probes
"""

import logging
from typing import Optional, Union

from .address import parse_address
from .bedrock import BedrockProbe
from .config_types import ProbeConfig
from .exceptions import UnsupportedProtocolError
from .models import ProbeOptions, ProtocolFamily, StatusRecord
from .normalizer import StatusNormalizer
from .protocol import JavaProbe

logger = logging.getLogger(__name__)

class ProbeDispatcher:
    """
    Routes a ProbeOptions to the matching probe and normalizes the outcome.

    Probes keep no per-query state, so one dispatcher can serve any number of
    concurrent queries.
    """

    def __init__(self, config: Optional[ProbeConfig] = None,
                 java_probe: Optional[JavaProbe] = None,
                 bedrock_probe: Optional[BedrockProbe] = None,
                 normalizer: Optional[StatusNormalizer] = None):
        self.config = config or ProbeConfig()
        self.java_probe = java_probe or JavaProbe(self.config)
        self.bedrock_probe = bedrock_probe or BedrockProbe(self.config)
        self.normalizer = normalizer or StatusNormalizer()

    async def query(self, options: ProbeOptions) -> StatusRecord:
        """Probe the target described by options, never raising for network failures"""
        if options.protocol is ProtocolFamily.JAVA:
            raw = await self.java_probe.probe(options.host, options.port, options.timeout_millis)
        elif options.protocol is ProtocolFamily.BEDROCK:
            raw = await self.bedrock_probe.probe(options.host, options.port)
        else:
            raise UnsupportedProtocolError(f"Unsupported protocol: {options.protocol!r}")

        record = self.normalizer.normalize(raw, options.protocol)
        logger.debug(f"{options.protocol.value} {options.host}:{options.port} -> {record.state.value}")
        return record

    async def query_address(self, address: str, protocol: Union[ProtocolFamily, str],
                            timeout_millis: Optional[int] = None) -> StatusRecord:
        """Parse a "host[:port]" string and query it"""
        family = ProtocolFamily.from_value(protocol)
        hostname = parse_address(address, family)
        return await self.query(ProbeOptions.from_hostname(hostname, family, timeout_millis))

async def query(address: str, protocol: Union[ProtocolFamily, str],
                timeout_millis: Optional[int] = None) -> StatusRecord:
    """Query a server with a default dispatcher"""
    return await ProbeDispatcher().query_address(address, protocol, timeout_millis)
