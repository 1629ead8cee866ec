"""
Database Package.

SQLite-backed persistence for parsed loot filters.

Public API:
- FilterDatabase: connection owner, schema setup, repository access
- SCHEMA_VERSION: Current schema version number

Example:
    from lootfilter.database import FilterDatabase
    db = FilterDatabase()
    db.filters.get_card_rarities(filter_id)
"""
from lootfilter.database.base import FilterDatabase
from lootfilter.database.schema import SCHEMA_VERSION

__all__ = [
    "FilterDatabase",
    "SCHEMA_VERSION",
]
