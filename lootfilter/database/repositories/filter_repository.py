"""
Filter repository: filter metadata and per-filter card rarities.

Rows in filter_card_rarities are a direct projection of a parse result
(one row per card); replacing them is atomic so a reader never sees a
half-written filter.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Dict, List, Mapping, Optional

from lootfilter.database.repositories.base_repository import BaseRepository
from lootfilter.database.utils import parse_db_timestamp, utc_now_iso
from lootfilter.filter_header import FilterMetadata, FilterType
from lootfilter.models import FilterCardRarity, StoredFilter

logger = logging.getLogger(__name__)


def _row_to_filter(row: sqlite3.Row) -> StoredFilter:
    return StoredFilter(
        id=row["id"],
        filter_type=FilterType(row["filter_type"]),
        file_path=row["file_path"],
        filter_name=row["filter_name"],
        last_update=row["last_update"],
        is_fully_parsed=bool(row["is_fully_parsed"]),
        parsed_at=parse_db_timestamp(row["parsed_at"]),
        created_at=parse_db_timestamp(row["created_at"]),
        updated_at=parse_db_timestamp(row["updated_at"]),
    )


class FilterRepository(BaseRepository):
    """Repository for filter metadata and filter card rarity operations."""

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def upsert_filter(self, metadata: FilterMetadata) -> None:
        """
        Insert or update a filter's metadata, keyed by its path-derived id.

        A filter whose last_update changed loses its parsed flag so the next
        ensure-parsed call re-reads it; otherwise the flag is kept.
        """
        self._execute(
            """
            INSERT INTO filter_metadata (id, filter_type, file_path, filter_name, last_update)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                file_path = excluded.file_path,
                filter_name = excluded.filter_name,
                filter_type = excluded.filter_type,
                is_fully_parsed = CASE
                    WHEN filter_metadata.last_update IS excluded.last_update
                    THEN filter_metadata.is_fully_parsed ELSE 0 END,
                parsed_at = CASE
                    WHEN filter_metadata.last_update IS excluded.last_update
                    THEN filter_metadata.parsed_at ELSE NULL END,
                last_update = excluded.last_update,
                updated_at = datetime('now')
            """,
            (
                metadata.id,
                metadata.filter_type.value,
                metadata.file_path,
                metadata.filter_name,
                metadata.last_update,
            ),
        )

    def get_filter(self, filter_id: str) -> Optional[StoredFilter]:
        row = self._execute_fetchone(
            "SELECT * FROM filter_metadata WHERE id = ?", (filter_id,)
        )
        return _row_to_filter(row) if row else None

    def get_all_filters(self) -> List[StoredFilter]:
        """All filters, local before online, then by name."""
        rows = self._execute_fetchall(
            """
            SELECT * FROM filter_metadata
            ORDER BY filter_type ASC, filter_name COLLATE NOCASE ASC
            """
        )
        return [_row_to_filter(row) for row in rows]

    def delete_filter(self, filter_id: str) -> bool:
        """Delete a filter; its card rarities go with it (FK cascade)."""
        cursor = self._execute(
            "DELETE FROM filter_metadata WHERE id = ?", (filter_id,)
        )
        return cursor.rowcount > 0

    def mark_as_parsed(self, filter_id: str) -> None:
        self._execute(
            """
            UPDATE filter_metadata
            SET is_fully_parsed = 1, parsed_at = ?, updated_at = datetime('now')
            WHERE id = ?
            """,
            (utc_now_iso(), filter_id),
        )

    # ------------------------------------------------------------------
    # Card rarities
    # ------------------------------------------------------------------

    def replace_card_rarities(
        self, filter_id: str, card_rarities: Mapping[str, int]
    ) -> int:
        """
        Replace every stored rarity for a filter in one transaction.

        Returns:
            Number of rows written.
        """
        rows = [(filter_id, name, int(rarity)) for name, rarity in card_rarities.items()]
        with self.transaction() as conn:
            conn.execute(
                "DELETE FROM filter_card_rarities WHERE filter_id = ?", (filter_id,)
            )
            conn.executemany(
                """
                INSERT INTO filter_card_rarities (filter_id, card_name, rarity)
                VALUES (?, ?, ?)
                """,
                rows,
            )
        logger.debug(f"Stored {len(rows)} card rarities for {filter_id}")
        return len(rows)

    def get_card_rarities(self, filter_id: str) -> List[FilterCardRarity]:
        """All card rarities for a filter, sorted by card name."""
        rows = self._execute_fetchall(
            """
            SELECT filter_id, card_name, rarity FROM filter_card_rarities
            WHERE filter_id = ?
            ORDER BY card_name ASC
            """,
            (filter_id,),
        )
        return [
            FilterCardRarity(
                filter_id=row["filter_id"],
                card_name=row["card_name"],
                rarity=row["rarity"],
            )
            for row in rows
        ]

    def get_card_rarity_map(self, filter_id: str) -> Dict[str, int]:
        return {r.card_name: r.rarity for r in self.get_card_rarities(filter_id)}

    def get_card_rarity(self, filter_id: str, card_name: str) -> Optional[int]:
        row = self._execute_fetchone(
            """
            SELECT rarity FROM filter_card_rarities
            WHERE filter_id = ? AND card_name = ?
            """,
            (filter_id, card_name),
        )
        return row["rarity"] if row else None

    def count_card_rarities(self, filter_id: str) -> int:
        row = self._execute_fetchone(
            "SELECT COUNT(*) AS cnt FROM filter_card_rarities WHERE filter_id = ?",
            (filter_id,),
        )
        return row["cnt"] if row else 0

    def set_card_rarity(self, filter_id: str, card_name: str, rarity: int) -> None:
        """Insert or overwrite the rarity of one card in one filter."""
        self._execute(
            """
            INSERT INTO filter_card_rarities (filter_id, card_name, rarity)
            VALUES (?, ?, ?)
            ON CONFLICT(filter_id, card_name) DO UPDATE SET rarity = excluded.rarity
            """,
            (filter_id, card_name, int(rarity)),
        )
