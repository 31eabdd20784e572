"""
Custom exceptions for CraftProbe
"""

class CraftProbeError(Exception):
    """Base exception for CraftProbe"""
    pass

class ProtocolError(CraftProbeError):
    """Protocol-related errors"""
    pass

class MalformedResponseError(ProtocolError):
    """Server answered but the response lacks required fields"""
    pass

class UnreachableTargetError(CraftProbeError):
    """Connection refused, timed out or dropped"""
    pass

class InvalidEncodingError(CraftProbeError):
    """Icon data URL is not base64 encoded"""
    pass

class UnsupportedProtocolError(CraftProbeError):
    """Requested protocol family is not supported"""
    pass

class ConfigError(CraftProbeError):
    """Configuration-related errors"""
    pass
