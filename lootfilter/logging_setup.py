# lootfilter/logging_setup.py
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from lootfilter.config import get_config_dir


def setup_logging(debug: bool = False) -> None:
    """
    Configure application-wide logging.

    - Logs to ~/.poe_filter_rarity/app.log (rotating, max ~1 MB, 3 backups)
    - Also logs to console (stderr) for interactive runs
    """
    log_file = get_config_dir() / "app.log"

    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers (useful if re-running in dev/REPL)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1_000_000,  # ~1 MB
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
    )
    file_handler.setLevel(level)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter("[%(levelname)s] %(name)s - %(message)s")
    )
    console_handler.setLevel(level)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialized")
    root_logger.info(f"Log file: {log_file}")
