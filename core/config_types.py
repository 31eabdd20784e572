"""
Shared configuration types for CraftProbe
"""

from dataclasses import dataclass

@dataclass
class ProbeConfig:
    java_timeout: float = 5.0  # seconds
    bedrock_timeout: float = 5.0  # seconds
    protocol_version: int = 770  # 1.21

@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str = "logs/craftprobe.log"

@dataclass
class UIConfig:
    strip_formatting: bool = True
    show_icon_info: bool = True
