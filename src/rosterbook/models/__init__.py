"""Domain models."""

from .player import MAX_STORED_INT, PlayerRecord

__all__ = ["MAX_STORED_INT", "PlayerRecord"]
