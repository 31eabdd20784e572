"""
Configuration management with YAML and validation
"""

import yaml
import logging
from typing import Dict, Any, Type, TypeVar
from pathlib import Path

from .exceptions import ConfigError
from .config_types import ProbeConfig, LoggingConfig, UIConfig

logger = logging.getLogger(__name__)

T = TypeVar('T')

class ConfigManager:
    """Configuration manager with validation and defaults"""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = Path(config_path)
        self.raw_config = self._load_config()

        # Parse configuration sections
        self.probe = self._parse_section('probe', ProbeConfig)
        self.logging = self._parse_section('logging', LoggingConfig)
        self.ui = self._parse_section('ui', UIConfig)

        self._validate_config()
        logger.info(f"Configuration loaded from {config_path}")

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            logger.warning(f"Config file {self.config_path} not found, creating default")
            self._create_default_config()

        try:
            with open(self.config_path, 'r') as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config: {e}")

        if not isinstance(raw, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(raw).__name__}")
        return raw

    def _create_default_config(self) -> None:
        """Create default configuration file"""
        default_config = {
            'probe': vars(ProbeConfig()),
            'logging': vars(LoggingConfig()),
            'ui': vars(UIConfig())
        }

        if self.config_path.parent != Path('.'):
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, 'w') as f:
            yaml.dump(default_config, f, default_flow_style=False, indent=2)

    def _parse_section(self, name: str, config_type: Type[T]) -> T:
        """Parse one configuration section into its dataclass"""
        section = self.raw_config.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(f"Section '{name}' must be a mapping")
        try:
            return config_type(**section)
        except TypeError as e:
            raise ConfigError(f"Invalid keys in section '{name}': {e}")

    def _validate_config(self) -> None:
        """Validate configuration values"""
        # Validate probe config
        if self.probe.java_timeout <= 0:
            raise ConfigError("Java timeout must be positive")
        if self.probe.bedrock_timeout <= 0:
            raise ConfigError("Bedrock timeout must be positive")

        # Validate logging config
        if not isinstance(logging.getLevelName(str(self.logging.level).upper()), int):
            raise ConfigError(f"Invalid logging level: {self.logging.level}")

        logger.info("Configuration validation passed")
