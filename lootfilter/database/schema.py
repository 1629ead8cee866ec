"""
Database Schema Definitions.

SQL statements for creating the filter tables. Kept apart from the
FilterDatabase class so the schema can be read in one place.
"""

# Current schema version. Increment if schema structure changes.
SCHEMA_VERSION = 1

CREATE_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    version INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS filter_metadata (
    id TEXT PRIMARY KEY,
    filter_type TEXT NOT NULL CHECK(filter_type IN ('local', 'online')),
    file_path TEXT NOT NULL UNIQUE,
    filter_name TEXT NOT NULL,
    last_update TEXT,
    is_fully_parsed INTEGER NOT NULL DEFAULT 0,
    parsed_at TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_filter_metadata_type
    ON filter_metadata(filter_type);

CREATE TABLE IF NOT EXISTS filter_card_rarities (
    filter_id TEXT NOT NULL,
    card_name TEXT NOT NULL,
    rarity INTEGER NOT NULL CHECK(rarity >= 1 AND rarity <= 4),
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (filter_id, card_name),
    FOREIGN KEY (filter_id) REFERENCES filter_metadata(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_filter_card_rarities_filter
    ON filter_card_rarities(filter_id);

CREATE INDEX IF NOT EXISTS idx_filter_card_rarities_card
    ON filter_card_rarities(card_name);
"""
