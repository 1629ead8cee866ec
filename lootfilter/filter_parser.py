"""
Loot filter parser for divination card rarities.

Reads the text of a Path of Exile loot filter (NeverSink-style layout) and
derives a coarse rarity for every divination card the filter tiers:

1. Find the "Divination Cards" entry in the TABLE OF CONTENTS
2. Jump to the matching section header in the filter body
3. Split the section into tier blocks (Show # $type->divination $tier->t1)
4. Pull quoted card names out of BaseType lines (multi-line aware)
5. Map tier names to CardRarity and keep the rarest tier per card

Parsing is pure and synchronous: no I/O, no shared mutable state. Reading
the file from disk lives in lootfilter.filter_reader.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class CardRarity(IntEnum):
    """App rarity scale. Lower is rarer."""

    EXTREMELY_RARE = 1
    RARE = 2
    LESS_COMMON = 3
    COMMON = 4


# Filter tier -> app rarity. None means the tier is skipped entirely.
TIER_TO_RARITY: Dict[str, Optional[CardRarity]] = {
    "excustomstack": None,  # multiple stacks only
    "exstack": None,  # multiple stacks only
    "t1": CardRarity.EXTREMELY_RARE,
    "t2": CardRarity.RARE,
    "t3": CardRarity.RARE,
    "tnew": CardRarity.RARE,  # new/unknown cards
    "t4c": CardRarity.LESS_COMMON,
    "t5c": CardRarity.COMMON,
    "t4": CardRarity.COMMON,
    "t5": CardRarity.COMMON,
    "restex": CardRarity.COMMON,  # remainder
}

TOC_START_MARKER = "TABLE OF CONTENTS"

# Example: "# [[4200]] Divination Cards"
TOC_DIVINATION_RE = re.compile(
    r"^#\s*\[\[([0-9]+)\]\]\s*Divination\s+Cards\s*$", re.IGNORECASE
)
# Any section header, e.g. "# [[4300]] Unique Maps"
SECTION_HEADER_RE = re.compile(r"^#\s*\[\[[0-9]+\]\]")
# Example: "Show # $type->divination $tier->t1"
TIER_BLOCK_HEADER_RE = re.compile(
    r"^Show\s+#\s+\$type->divination\s+\$tier->(\S+)\s*$", re.IGNORECASE
)
SHOW_HIDE_BLOCK_RE = re.compile(r"^(Show|Hide)\s", re.IGNORECASE)
# "BaseType == ..." and "BaseType ..." are both valid
BASETYPE_LINE_RE = re.compile(r"^\s*BaseType\s*(?:==)?\s*", re.IGNORECASE)
QUOTED_STRING_RE = re.compile(r'"([^"]*)"')
LINE_SPLIT_RE = re.compile(r"\r?\n")


def _section_header_re(section_id: str) -> re.Pattern[str]:
    """Header pattern for one specific section id."""
    return re.compile(
        rf"^#\s*\[\[{re.escape(section_id)}\]\]\s*Divination\s+Cards\s*$",
        re.IGNORECASE,
    )


@dataclass
class TierBlock:
    """One `Show # $type->divination $tier->...` block and its cards."""

    tier_name: str
    rarity: Optional[CardRarity]
    card_names: List[str] = field(default_factory=list)

    @property
    def is_ignored(self) -> bool:
        return self.rarity is None


@dataclass
class FilterParseResult:
    """Outcome of parsing one filter's divination card section."""

    card_rarities: Dict[str, CardRarity] = field(default_factory=dict)
    has_divination_section: bool = False

    @property
    def total_cards(self) -> int:
        return len(self.card_rarities)

    @classmethod
    def empty(cls) -> "FilterParseResult":
        """The not-found result: no section, no cards."""
        return cls(card_rarities={}, has_divination_section=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for serialization or testing."""
        return {
            "card_rarities": {
                name: int(rarity) for name, rarity in self.card_rarities.items()
            },
            "has_divination_section": self.has_divination_section,
            "total_cards": self.total_cards,
        }


def get_tier_mapping() -> Dict[str, Optional[CardRarity]]:
    """Copy of the tier lookup table, for diagnostics and tests."""
    return dict(TIER_TO_RARITY)


class FilterParser:
    """
    Stateless divination card parser.

    All methods are static; the class only groups the pipeline stages so
    each one can be exercised on its own in tests.
    """

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    @staticmethod
    def parse_filter_content(content: str) -> FilterParseResult:
        """
        Parse raw filter text and extract divination card rarities.

        Never raises for textual input. A filter without a usable
        Divination Cards section yields FilterParseResult.empty().
        """
        lines = FilterParser.split_lines(content)

        toc_entry = FilterParser.find_divination_toc_entry(lines)
        if toc_entry is None:
            logger.info("No Divination Cards entry in filter TOC")
            return FilterParseResult.empty()
        toc_index, section_id = toc_entry

        start = FilterParser.find_section_start(lines, section_id, after_index=toc_index)
        if start == -1:
            logger.info(
                f"Divination Cards section header [[{section_id}]] not found in body"
            )
            return FilterParseResult.empty()

        section_lines = FilterParser.extract_section_lines(lines, start)
        blocks = FilterParser.parse_tier_blocks(section_lines)

        unknown = sorted(
            {b.tier_name for b in blocks if b.tier_name not in TIER_TO_RARITY}
        )
        if unknown:
            logger.debug(f"Unrecognized divination tiers ignored: {', '.join(unknown)}")

        card_rarities = FilterParser.build_rarity_map(blocks)
        logger.debug(
            f"Parsed divination section [[{section_id}]]: "
            f"{len(blocks)} tier blocks, {len(card_rarities)} cards"
        )
        return FilterParseResult(
            card_rarities=card_rarities,
            has_divination_section=True,
        )

    @staticmethod
    def split_lines(content: str) -> List[str]:
        """Split on LF or CRLF."""
        return LINE_SPLIT_RE.split(content)

    # ------------------------------------------------------------------
    # TOC navigation
    # ------------------------------------------------------------------

    @staticmethod
    def find_divination_toc_entry(lines: List[str]) -> Optional[Tuple[int, str]]:
        """
        Locate the Divination Cards entry listed in the TOC.

        Lines before the TABLE OF CONTENTS marker are skipped. Inside the
        TOC the first `# [[NNNN]] Divination Cards` entry wins; a Show/Hide
        line means the TOC is over and nothing was found.

        Returns:
            (line index, section id) or None.
        """
        in_toc = False

        for i, line in enumerate(lines):
            trimmed = line.strip()

            if not in_toc:
                if TOC_START_MARKER in trimmed.upper():
                    in_toc = True
                continue

            match = TOC_DIVINATION_RE.match(trimmed)
            if match:
                return i, match.group(1)

            if SHOW_HIDE_BLOCK_RE.match(trimmed):
                break

        return None

    @staticmethod
    def find_divination_section_id(lines: List[str]) -> Optional[str]:
        """The section id from the TOC entry (e.g. "4200"), or None."""
        entry = FilterParser.find_divination_toc_entry(lines)
        return entry[1] if entry is not None else None

    # ------------------------------------------------------------------
    # Section extraction
    # ------------------------------------------------------------------

    @staticmethod
    def find_section_start(
        lines: List[str], section_id: str, after_index: int = -1
    ) -> int:
        """
        Index of the section header in the filter body, or -1.

        The TOC entry and the real header are identical text, and the body
        comes after the TOC, so the last occurrence is the one we want.
        Matches at or before after_index (the TOC entry itself) don't count.
        """
        header_re = _section_header_re(section_id)
        last_index = -1

        for i, line in enumerate(lines):
            if i > after_index and header_re.match(line.strip()):
                last_index = i

        return last_index

    @staticmethod
    def extract_section_lines(lines: List[str], start_index: int) -> List[str]:
        """Lines after the header up to the next `# [[NNNN]]` header or EOF."""
        section: List[str] = []

        for line in lines[start_index + 1:]:
            if SECTION_HEADER_RE.match(line.strip()):
                break
            section.append(line)

        return section

    # ------------------------------------------------------------------
    # Tier blocks
    # ------------------------------------------------------------------

    @staticmethod
    def parse_tier_blocks(section_lines: List[str]) -> List[TierBlock]:
        """
        Split the section body into tier blocks.

        A block starts at a divination tier header and ends at the next
        Show/Hide line. Card names come from BaseType lines and from
        quoted-only continuation lines directly below them.
        """
        blocks: List[TierBlock] = []
        current: Optional[TierBlock] = None
        collecting_base_type = False

        for line in section_lines:
            trimmed = line.strip()

            tier_match = TIER_BLOCK_HEADER_RE.match(trimmed)
            if tier_match:
                if current is not None:
                    blocks.append(current)
                tier_name = tier_match.group(1).lower()
                current = TierBlock(
                    tier_name=tier_name,
                    rarity=FilterParser.map_tier_to_rarity(tier_name),
                )
                collecting_base_type = False
                continue

            if current is not None and SHOW_HIDE_BLOCK_RE.match(trimmed):
                blocks.append(current)
                current = None
                collecting_base_type = False
                continue

            if current is None:
                continue

            if BASETYPE_LINE_RE.match(trimmed):
                collecting_base_type = True
                current.card_names.extend(FilterParser.extract_card_names(trimmed))
                continue

            if collecting_base_type and trimmed.startswith('"'):
                current.card_names.extend(FilterParser.extract_card_names(trimmed))
                continue

            # Blank lines and comments keep a continuation alive
            if collecting_base_type and trimmed and not trimmed.startswith("#"):
                collecting_base_type = False

        if current is not None:
            blocks.append(current)

        return blocks

    @staticmethod
    def extract_card_names(line: str) -> List[str]:
        """
        All double-quoted names on a line, trimmed, empties dropped.

        Examples:
            'BaseType == "The Doctor" "The Nurse"' -> ["The Doctor", "The Nurse"]
            '    "House of Mirrors"'               -> ["House of Mirrors"]
        """
        names = (raw.strip() for raw in QUOTED_STRING_RE.findall(line))
        return [name for name in names if name]

    # ------------------------------------------------------------------
    # Rarity mapping
    # ------------------------------------------------------------------

    @staticmethod
    def map_tier_to_rarity(tier_name: str) -> Optional[CardRarity]:
        """Rarity for a tier name, or None when the tier is ignored/unknown."""
        return TIER_TO_RARITY.get(tier_name.lower())

    @staticmethod
    def build_rarity_map(tier_blocks: List[TierBlock]) -> Dict[str, CardRarity]:
        """
        Fold tier blocks into card -> rarity.

        A card listed under several tiers keeps the rarest one (lowest
        number). Ignored tiers contribute nothing.
        """
        rarity_map: Dict[str, CardRarity] = {}

        for block in tier_blocks:
            if block.rarity is None:
                continue
            for name in block.card_names:
                existing = rarity_map.get(name)
                if existing is None or block.rarity < existing:
                    rarity_map[name] = block.rarity

        return rarity_map


def parse_filter_content(content: str) -> FilterParseResult:
    """Module-level shortcut for FilterParser.parse_filter_content."""
    return FilterParser.parse_filter_content(content)
