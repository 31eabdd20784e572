"""
Network utilities and helpers
"""

import time
import logging
from typing import Optional

logger = logging.getLogger(__name__)

class NetworkUtils:
    """Network utility functions"""

    @staticmethod
    def is_valid_port(port: int) -> bool:
        """Check if port number is valid"""
        return 1 <= port <= 65535

    @staticmethod
    def parse_port(value: str) -> Optional[int]:
        """Parse a port string, None if it is not a usable port"""
        try:
            port = int(value)
        except (TypeError, ValueError):
            return None
        return port if NetworkUtils.is_valid_port(port) else None

class Stopwatch:
    """Monotonic millisecond timer"""

    def __init__(self):
        self.start_time = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.start_time) * 1000

class Deadline:
    """Shared time budget for a multi-step network exchange"""

    def __init__(self, timeout: float):
        self.expires_at = time.monotonic() + timeout

    def remaining(self) -> float:
        """Seconds left, never negative"""
        return max(self.expires_at - time.monotonic(), 0.0)
