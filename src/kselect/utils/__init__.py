"""
Shared utilities: logging setup and input validators.
"""

from .logger import setup_logging

__all__ = [
    'setup_logging'
]
