"""Port interfaces for chessmirror."""

from chessmirror.ports.game_source_client import GameSourceClient

__all__ = ["GameSourceClient"]
