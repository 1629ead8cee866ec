"""Tests for rarity source settings and rarity resolution endpoints."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from lootfilter.filter_reader import parse_filter_file, parse_filter_file_async


class TestRaritySource:
    def test_default_source(self, client: TestClient):
        response = client.get("/api/v1/settings/rarity-source")

        assert response.status_code == 200
        assert response.json() == {"source": "poe.ninja"}

    def test_set_source(self, client: TestClient, app_context):
        response = client.put("/api/v1/settings/rarity-source", json={"source": "filter"})

        assert response.status_code == 200
        assert app_context.config.rarity_source == "filter"
        assert client.get("/api/v1/settings/rarity-source").json()["source"] == "filter"

    def test_invalid_source(self, client: TestClient):
        response = client.put("/api/v1/settings/rarity-source", json={"source": "poe.watch"})
        assert response.status_code == 422


class TestSelectedFilter:
    def test_nothing_selected(self, client: TestClient):
        assert client.get("/api/v1/settings/selected-filter").json() == {"filter_id": None}

    def test_select_and_clear(self, client: TestClient, registered_filter_id: str):
        response = client.put(
            "/api/v1/settings/selected-filter", json={"filter_id": registered_filter_id}
        )
        assert response.status_code == 200
        assert client.get("/api/v1/settings/selected-filter").json() == {
            "filter_id": registered_filter_id
        }

        client.put("/api/v1/settings/selected-filter", json={"filter_id": None})
        assert client.get("/api/v1/settings/selected-filter").json() == {"filter_id": None}

    def test_select_unknown(self, client: TestClient):
        response = client.put(
            "/api/v1/settings/selected-filter", json={"filter_id": "filter_deadbeef"}
        )
        assert response.status_code == 404

    def test_deleting_selected_filter_clears_selection(
        self, client: TestClient, registered_filter_id: str
    ):
        client.put("/api/v1/settings/selected-filter", json={"filter_id": registered_filter_id})
        client.delete(f"/api/v1/filters/{registered_filter_id}")

        assert client.get("/api/v1/settings/selected-filter").json() == {"filter_id": None}


class TestResolveRarities:
    CARDS = ["The Doctor", "Rain of Chaos", "Unknown Card"]
    FALLBACK = {"The Doctor": 2, "Rain of Chaos": 4}

    def test_filter_source(self, client: TestClient, registered_filter_id: str):
        client.put("/api/v1/settings/rarity-source", json={"source": "filter"})
        client.put("/api/v1/settings/selected-filter", json={"filter_id": registered_filter_id})

        response = client.post(
            "/api/v1/rarities/resolve",
            json={"card_names": self.CARDS, "fallback": self.FALLBACK},
        )

        assert response.status_code == 200
        assert response.json() == {
            "source": "filter",
            "rarities": {"The Doctor": 1, "Rain of Chaos": 3, "Unknown Card": 4},
        }

    def test_market_source_uses_fallback(self, client: TestClient, registered_filter_id: str):
        client.put("/api/v1/settings/selected-filter", json={"filter_id": registered_filter_id})

        data = client.post(
            "/api/v1/rarities/resolve",
            json={"card_names": self.CARDS, "fallback": self.FALLBACK},
        ).json()

        assert data["source"] == "poe.ninja"
        assert data["rarities"] == {"The Doctor": 2, "Rain of Chaos": 4, "Unknown Card": 4}

    def test_filter_source_without_selection_uses_fallback(self, client: TestClient):
        client.put("/api/v1/settings/rarity-source", json={"source": "filter"})

        data = client.post(
            "/api/v1/rarities/resolve", json={"card_names": ["The Doctor"]}
        ).json()

        assert data["rarities"] == {"The Doctor": 4}

    def test_empty_card_list_rejected(self, client: TestClient):
        response = client.post("/api/v1/rarities/resolve", json={"card_names": []})
        assert response.status_code == 422

    def test_fallback_rarity_out_of_range_rejected(self, client: TestClient):
        response = client.post(
            "/api/v1/rarities/resolve",
            json={"card_names": ["The Doctor"], "fallback": {"The Doctor": 99}},
        )

        assert response.status_code == 422
        assert response.json()["message"] == "Validation error"

    def test_fallback_rarity_zero_rejected(self, client: TestClient):
        response = client.post(
            "/api/v1/rarities/resolve",
            json={"card_names": ["The Doctor"], "fallback": {"The Doctor": 0}},
        )
        assert response.status_code == 422

    def test_filter_source_lazy_parse_awaits_file_read(
        self, client: TestClient, registered_filter_id: str
    ):
        client.put("/api/v1/settings/rarity-source", json={"source": "filter"})
        client.put("/api/v1/settings/selected-filter", json={"filter_id": registered_filter_id})

        with patch(
            "lootfilter.filter_service.parse_filter_file_async",
            wraps=parse_filter_file_async,
        ) as async_read, patch(
            "lootfilter.filter_service.parse_filter_file", wraps=parse_filter_file
        ) as blocking_read:
            response = client.post(
                "/api/v1/rarities/resolve", json={"card_names": ["The Doctor"]}
            )

        assert response.json()["rarities"] == {"The Doctor": 1}
        async_read.assert_awaited_once()
        blocking_read.assert_not_called()
