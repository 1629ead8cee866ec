"""
Database repositories package.

Public API:
- BaseRepository: Base class for all repositories
- FilterRepository: Filter metadata and filter card rarities
"""
from lootfilter.database.repositories.base_repository import BaseRepository
from lootfilter.database.repositories.filter_repository import FilterRepository

__all__ = [
    "BaseRepository",
    "FilterRepository",
]
