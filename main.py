# main.py
"""
Loot filter rarity extractor - command line entry point.

Usage:
    python main.py path/to/NeverSink.filter
    python main.py path/to/filter --json
    python main.py path/to/filter --debug
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from lootfilter.config import Config
from lootfilter.filter_parser import CardRarity, FilterParseResult
from lootfilter.filter_reader import parse_filter_file
from lootfilter.logging_setup import setup_logging

RARITY_LABELS = {
    CardRarity.EXTREMELY_RARE: "Extremely rare",
    CardRarity.RARE: "Rare",
    CardRarity.LESS_COMMON: "Less common",
    CardRarity.COMMON: "Common",
}


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract divination card rarities from a Path of Exile loot filter"
    )
    parser.add_argument("filter_path", help="Path to a .filter file or an online filter file")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full card -> rarity mapping as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (also enabled by logging.debug in config.json)",
    )
    return parser


def format_summary(result: FilterParseResult) -> str:
    """Card count per rarity, rarest first."""
    if not result.has_divination_section:
        return "No Divination Cards section found."

    lines = [f"Divination cards: {result.total_cards}"]
    for rarity in CardRarity:
        count = sum(1 for r in result.card_rarities.values() if r == rarity)
        lines.append(f"  {int(rarity)} {RARITY_LABELS[rarity]:<15} {count:>5}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """Parse one filter and print the result. Returns the process exit code."""
    args = build_arg_parser().parse_args(argv)

    config = Config()
    setup_logging(debug=args.debug or config.debug_logging)
    logger = logging.getLogger(__name__)
    logger.info(f"Parsing filter: {args.filter_path}")

    result = parse_filter_file(args.filter_path)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, sort_keys=True, ensure_ascii=False))
    else:
        print(format_summary(result))

    return 0 if result.has_divination_section else 1


if __name__ == "__main__":
    sys.exit(main())
