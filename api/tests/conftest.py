"""
api.tests.conftest - Pytest fixtures for API tests.

The client runs against a real AppContext (config, SQLite database and
filter service) rooted in tmp_path.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from lootfilter.app_context import AppContext, create_app_context

SAMPLE_FILTER = "\n".join([
    "#name: NeverSink's filter - 3-STRICT",
    "#lastUpdate: 2025-06-10T12:00:00Z",
    "# [WELCOME] TABLE OF CONTENTS + QUICKJUMP TABLE",
    "# [[0100]] Global overriding rules",
    "# [[4200]] Divination Cards",
    "# [[4300]] Unique Maps",
    "",
    "# [[0100]] Global overriding rules",
    "Show # $type->global",
    '\tBaseType == "Mirror of Kalandra"',
    "",
    "# [[4200]] Divination Cards",
    "Show # $type->divination $tier->t1",
    '\tBaseType == "The Doctor" "House of Mirrors"',
    "",
    "Show # $type->divination $tier->t4c",
    '\tBaseType == "Rain of Chaos"',
    "",
    "Show # $type->divination $tier->exstack",
    '\tBaseType == "Rain of Chaos" "The Void"',
    "",
    "Show # $type->divination $tier->t5",
    '\tBaseType == "The Carrion Crow"',
    '\t"The Doctor"',
    "",
    "# [[4300]] Unique Maps",
    "Show # $type->uniques",
])

EXPECTED_RARITIES = {
    "House of Mirrors": 1,
    "Rain of Chaos": 3,
    "The Carrion Crow": 4,
    "The Doctor": 1,
}

NO_SECTION_FILTER = "\n".join([
    "# TABLE OF CONTENTS",
    "# [[0100]] Global overriding rules",
    "Show # $type->global",
])


@pytest.fixture
def sample_filter_content() -> str:
    return SAMPLE_FILTER


@pytest.fixture
def local_filter_path(tmp_path) -> Path:
    path = tmp_path / "NeverSink-Strict.filter"
    path.write_text(SAMPLE_FILTER, encoding="utf-8")
    return path


@pytest.fixture
def online_filter_path(tmp_path) -> Path:
    online_dir = tmp_path / "OnlineFilters"
    online_dir.mkdir()
    path = online_dir / "c0ffee00"
    path.write_text(SAMPLE_FILTER, encoding="utf-8")
    return path


@pytest.fixture
def no_section_filter_path(tmp_path) -> Path:
    path = tmp_path / "Plain.filter"
    path.write_text(NO_SECTION_FILTER, encoding="utf-8")
    return path


@pytest.fixture
def app_context(tmp_path) -> Generator[AppContext, None, None]:
    """A real AppContext whose config and database live in tmp_path."""
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"database": {"path": str(tmp_path / "data.db")}}))
    ctx = create_app_context(config_file)
    yield ctx
    ctx.close()


@pytest.fixture
def client(app_context: AppContext) -> Generator[TestClient, None, None]:
    """Create a test client bound to the temporary app context."""
    import api.main
    from api import dependencies
    from api.main import app

    # Pre-set the global so the lifespan does not build a default context
    original_context = api.main._app_context
    api.main._app_context = app_context

    app.dependency_overrides[dependencies.get_app_context] = lambda: app_context

    with TestClient(app) as test_client:
        yield test_client

    api.main._app_context = original_context
    app.dependency_overrides.clear()


@pytest.fixture
def registered_filter_id(client: TestClient, local_filter_path: Path) -> str:
    response = client.post("/api/v1/filters", json={"file_path": str(local_filter_path)})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def expected_rarities() -> dict[str, int]:
    return dict(EXPECTED_RARITIES)
