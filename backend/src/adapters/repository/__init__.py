"""
Repository adapters: the LeagueRepository contract and its in-memory implementation.
"""

from .base import LeagueRepository
from .memory_store import InMemoryLeagueStore
from .sample_data import build_sample_store

__all__ = [
    "LeagueRepository",
    "InMemoryLeagueStore",
    "build_sample_store",
]
