"""
CraftProbe Utils Package
"""

from .network import NetworkUtils, Stopwatch, Deadline

__all__ = [
    'NetworkUtils',
    'Stopwatch',
    'Deadline'
]
