"""Utility exports for the chessmirror package."""

from .hasher import Hasher
from .logger import Logger, get_logger, set_level
from .normalize_string import normalize_string
from .now import Now
from .to_int import to_int

__all__ = [
    "Hasher",
    "Logger",
    "Now",
    "get_logger",
    "normalize_string",
    "set_level",
    "to_int",
]
