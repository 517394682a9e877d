"""Persistence layer for games and their picks."""

from .base import GameStore, Mutation, Transition
from .memory import MemoryGameStore
from .sqlite import SqliteGameStore

__all__ = [
    "GameStore",
    "MemoryGameStore",
    "Mutation",
    "SqliteGameStore",
    "Transition",
]
