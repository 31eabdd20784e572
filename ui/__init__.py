"""
CraftProbe UI Package
"""

from .console import ConsoleUI

__all__ = [
    'ConsoleUI'
]
