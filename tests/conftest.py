import faulthandler
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from lootfilter.config import Config
from lootfilter.database import FilterDatabase

# (tier, [card names]) pairs; a None tier writes a non-divination Show block
TierSpec = Tuple[Optional[str], Sequence[str]]


def build_filter_content(
    tiers: Sequence[TierSpec] = (),
    *,
    section_id: str = "4200",
    name: Optional[str] = None,
    last_update: Optional[str] = None,
    include_toc_entry: bool = True,
    include_body_header: bool = True,
    newline: str = "\n",
) -> str:
    """
    Build a NeverSink-style filter with a TOC and a divination section.

    Each tier is written as one block with a single BaseType line.
    """
    lines: List[str] = [
        "#" + "=" * 60,
        "# Test loot filter",
        "#" + "=" * 60,
    ]
    if name is not None:
        lines.append(f"#name: {name}")
    if last_update is not None:
        lines.append(f"#lastUpdate: {last_update}")
    lines += [
        "#",
        "# [WELCOME] TABLE OF CONTENTS + QUICKJUMP TABLE",
        "# [[0100]] Global overriding rules",
    ]
    if include_toc_entry:
        lines.append(f"# [[{section_id}]] Divination Cards")
    lines += [
        "# [[4300]] Unique Maps",
        "",
        "#" + "=" * 60,
        "# [[0100]] Global overriding rules",
        "#" + "=" * 60,
        "Show # $type->global",
        '\tBaseType == "Mirror of Kalandra"',
        "",
    ]
    if include_body_header:
        lines += [
            "#" + "=" * 60,
            f"# [[{section_id}]] Divination Cards",
            "#" + "=" * 60,
        ]
        for tier, cards in tiers:
            quoted = " ".join(f'"{card}"' for card in cards)
            if tier is None:
                lines.append("Show # $type->divination->other")
            else:
                lines.append(f"Show # $type->divination $tier->{tier}")
            lines += [
                '\tClass == "Divination Cards"',
                f"\tBaseType == {quoted}",
                "\tSetFontSize 45",
                "",
            ]
    lines += [
        "#" + "=" * 60,
        "# [[4300]] Unique Maps",
        "#" + "=" * 60,
        "Show # $type->uniques $tier->t1",
        '\tBaseType == "The Doctor"',
        "",
    ]
    return newline.join(lines)


@pytest.fixture
def filter_content_builder():
    """Expose build_filter_content to tests."""
    return build_filter_content


@pytest.fixture
def sample_filter_content() -> str:
    return build_filter_content(
        [
            ("t1", ["The Doctor", "House of Mirrors"]),
            ("t2", ["The Nurse"]),
            ("t4c", ["Rain of Chaos"]),
            ("t5", ["The Carrion Crow", "The Doctor"]),
            ("exstack", ["Rain of Chaos", "Stacked Deck Only"]),
        ],
        name="NeverSink's filter - 3-STRICT",
        last_update="2025-06-10T12:00:00Z",
    )


@pytest.fixture
def expected_sample_rarities() -> Dict[str, int]:
    return {
        "The Doctor": 1,
        "House of Mirrors": 1,
        "The Nurse": 2,
        "Rain of Chaos": 3,
        "The Carrion Crow": 4,
    }


@pytest.fixture
def local_filter_file(tmp_path, sample_filter_content) -> Path:
    path = tmp_path / "NeverSink-Strict.filter"
    path.write_text(sample_filter_content, encoding="utf-8")
    return path


@pytest.fixture
def online_filter_file(tmp_path, sample_filter_content) -> Path:
    online_dir = tmp_path / "OnlineFilters"
    online_dir.mkdir()
    path = online_dir / "a1b2c3d4"
    path.write_text(sample_filter_content, encoding="utf-8")
    return path


@pytest.fixture
def temp_config(tmp_path):
    """
    Provide a fresh Config with validation.

    This fixture GUARANTEES a clean config or fails loudly.
    """
    config_path = tmp_path / f"config_{id(tmp_path)}_{time.time_ns()}.json"
    config = Config(config_file=config_path)

    assert config.rarity_source == "poe.ninja", \
        f"FIXTURE CONTAMINATED! source={config.rarity_source}, file={config.config_file}"
    assert config.selected_filter_id is None, \
        f"FIXTURE CONTAMINATED! selected={config.selected_filter_id}, file={config.config_file}"

    return config


@pytest.fixture
def temp_db(tmp_path):
    db_path = tmp_path / f"db_{id(tmp_path)}_{time.time_ns()}.db"
    db = FilterDatabase(db_path=db_path)
    yield db
    db.close()


def pytest_collection_modifyitems(config, items):
    """Assign tier markers based on test location."""
    for item in items:
        path = Path(str(item.fspath)).as_posix()

        if "/tests/integration/" in path or "/api/tests/" in path:
            item.add_marker(pytest.mark.integration)
        elif "/tests/unit/" in path:
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


def pytest_sessionstart(session):  # pragma: no cover - test harness init
    """Enable faulthandler for the entire test run to aid diagnosing hangs."""
    try:
        faulthandler.enable(file=sys.stderr, all_threads=True)
    except Exception:
        pass
