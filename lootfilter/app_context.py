# lootfilter/app_context.py
from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional

from lootfilter.config import Config
from lootfilter.database import FilterDatabase
from lootfilter.filter_service import FilterService


@dataclass
class AppContext:
    """
    Aggregates the services used by the API and CLI.

    - config: user settings (rarity source, selected filter, paths)
    - db: SQLite persistence of filter metadata and card rarities
    - filter_service: parse/store/resolve façade over parser + db

    Call close() when the application exits to release resources.
    """
    config: Config
    db: FilterDatabase
    filter_service: FilterService

    def close(self) -> None:
        logger = logging.getLogger(__name__)
        logger.info("Closing AppContext resources...")
        self.db.close()
        logger.info("AppContext resources closed")


def create_app_context(config_file: Optional[Path] = None) -> AppContext:
    config = Config(config_file=config_file)
    db = FilterDatabase(db_path=config.database_path)
    return AppContext(
        config=config,
        db=db,
        filter_service=FilterService(db, config),
    )
