"""
API Tests for SkillScope.

Tests all API endpoints across all routers.
Uses pytest with FastAPI TestClient; the data source is replaced
through app.dependency_overrides.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def client(memory_source):
    """Test client backed by the in-memory data source."""
    from skillscope.api.main import app
    from skillscope.api.dependencies import get_data_source

    app.dependency_overrides[get_data_source] = lambda: memory_source
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_client():
    """Test client without a data source override or Supabase settings."""
    from skillscope.api.main import app

    app.dependency_overrides.clear()
    with TestClient(app) as client:
        yield client


# =============================================================================
# Health Tests (API-001 to API-002)
# =============================================================================

class TestHealth:
    """Test health endpoint."""

    def test_health(self, client):
        """API-001: Health reports version and data source status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"
        assert data["data_source_configured"] is False

    def test_response_time_header(self, client):
        """API-002: Request logging middleware adds the timing header."""
        response = client.get("/health")
        assert "x-response-time-ms" in response.headers


# =============================================================================
# Skills Tests (API-010 to API-014)
# =============================================================================

class TestSkillsEndpoints:
    """Test /skills endpoints."""

    def test_get_profile(self, client):
        """API-010: Balanced profile by default."""
        response = client.get("/skills/model-x")

        assert response.status_code == 200
        data = response.json()
        assert data["entity_id"] == "model-x"
        assert data["balanced_only"] is True
        assert len(data["skills"]) == 10
        assert data["domain"] == [0, 44]
        assert data["empty"] is False

        planning = data["skills"][0]
        assert planning["skill"] == "Strategic Planning"
        assert planning["rating"] == 40.0

    def test_get_profile_all_environments(self, client):
        """API-011: balanced_only=false includes every environment."""
        response = client.get("/skills/model-x", params={"balanced_only": "false"})

        assert response.status_code == 200
        assert response.json()["skills"][0]["rating"] == pytest.approx(35.0)

    def test_get_profile_unknown_entity(self, client):
        """API-012: Unknown entity is an empty profile, not an error."""
        response = client.get("/skills/nobody")

        assert response.status_code == 200
        assert response.json()["empty"] is True
        assert response.json()["domain"] == [0, 100]

    def test_aggregate_rows(self, client, poker_row):
        """API-013: Posted rows are aggregated without the data source."""
        response = client.post(
            "/skills/aggregate",
            json={"environments": [poker_row], "balanced_only": True}
        )
        assert response.status_code == 200
        skills = {s["skill"]: s for s in response.json()["skills"]}
        assert skills["Bluffing"]["rating"] == 30.0
        assert skills["Persuasion"]["contributions"][0]["relative_weight"] == 1.0

    def test_aggregate_sparse_rows(self, client):
        """API-014: Sparse rows are coerced, not rejected."""
        response = client.post(
            "/skills/aggregate",
            json={"environments": [{"env_name": "Go", "skill_1": "Memory Recall", "skill_1_weight": "2"}]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["environment_count"] == 1
        skills = {s["skill"]: s for s in data["skills"]}
        assert skills["Memory Recall"]["rating"] == 25.0
        assert skills["Memory Recall"]["contributions"][0]["environment"] == "Go"


# =============================================================================
# History Tests (API-020 to API-027)
# =============================================================================

class TestHistoryEndpoints:
    """Test /history endpoints."""

    def test_get_history(self, client):
        """API-020: Snapshots for the requested pairs."""
        response = client.get(
            "/history",
            params={"model_ids": [1, 2], "human_ids": [1, 1], "time_range": "48h"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["time_range"] == "48H"
        assert data["snapshot_count"] == 2
        assert data["empty"] is False
        assert data["entities"][0] == {"composite_id": "1-1", "name": "Model X"}
        for point in data["points"]:
            assert set(point["values"]) == {"1-1", "2-1"}

    def test_get_history_length_mismatch(self, client):
        """API-021: model_ids and human_ids must pair up."""
        response = client.get("/history", params={"model_ids": [1, 2], "human_ids": [1]})
        assert response.status_code == 400

    def test_get_history_invalid_range(self, client):
        """API-022: Unknown time range is rejected."""
        response = client.get(
            "/history",
            params={"model_ids": [1], "human_ids": [1], "time_range": "1Y"}
        )
        assert response.status_code == 400

    def test_get_history_missing_ids(self, client):
        """API-023: model_ids is required."""
        response = client.get("/history")
        assert response.status_code == 422

    def test_reconstruct_series(self, client, history_rows):
        """API-024: Posted snapshots over hours 1 to 5."""
        response = client.post(
            "/history/series",
            json={
                "snapshots": history_rows,
                "tracked": ["1-1", "2-1"],
                "default_mu": 25.0,
                "default_sigma": 8.0,
                "start": "2025-03-01T01:00:00Z",
                "end": "2025-03-01T05:00:00Z",
            }
        )

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 5

        x_values = [p["values"]["1-1"]["value"] for p in data["points"]]
        y_bounds = [(p["values"]["2-1"]["lower"], p["values"]["2-1"]["upper"]) for p in data["points"]]
        assert x_values == [25.0, 25.0, 25.0, 30.0, 30.0]
        assert y_bounds == [(17.0, 33.0)] * 5

    def test_reconstruct_series_bad_id(self, client):
        """API-025: Malformed composite ids are rejected."""
        response = client.post("/history/series", json={"tracked": ["abc"]})
        assert response.status_code == 400

    def test_reconstruct_series_range_too_long(self, client):
        """API-026: A requested range beyond the hour limit is a 400."""
        response = client.post(
            "/history/series",
            json={
                "tracked": ["1-1"],
                "start": "1970-01-01T00:00:00Z",
                "end": "2025-03-01T05:00:00Z",
            }
        )

        assert response.status_code == 400
        assert "limit" in response.json()["detail"]

    def test_get_history_env_subset(self, memory_source):
        """API-027: Single-environment subsets pass their environment ids."""
        from skillscope.api.main import app
        from skillscope.api.dependencies import get_data_source

        requested = []

        class RecordingSource:
            async def get_rating_history(self, entities, time_range, subset="Balanced Subset", env_ids=None):
                requested.append((subset, env_ids))
                return await memory_source.get_rating_history(entities, time_range, subset=subset, env_ids=env_ids)

        app.dependency_overrides[get_data_source] = lambda: RecordingSource()
        try:
            with TestClient(app) as client:
                response = client.get(
                    "/history",
                    params={"model_ids": [1], "human_ids": [1], "subset": "SecretMafia-v0 (6 Players)"}
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        assert requested == [("SecretMafia-v0 (6 Players)", [75])]


# =============================================================================
# Leaderboard Tests (API-030 to API-034)
# =============================================================================

class TestLeaderboardEndpoints:
    """Test /leaderboard endpoint."""

    def test_first_page(self, client):
        """API-030: Default filters, first page, ranks from 1."""
        response = client.get("/leaderboard")

        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["total"] == 26
        assert data["total_pages"] == 3
        assert [e["rank"] for e in data["entries"]] == list(range(1, 11))
        assert data["filters"]["subset"] == "Balanced Subset"
        assert data["empty"] is False

    def test_last_page_and_clamp(self, client):
        """API-031: Page past the end is clamped to the last page."""
        response = client.get("/leaderboard", params={"page": 99})

        data = response.json()
        assert data["page"] == 3
        assert [e["rank"] for e in data["entries"]] == list(range(21, 27))

    def test_filters(self, client):
        """API-032: Standard filter and subset selection."""
        response = client.get("/leaderboard", params={"standard": "Non-standard"})
        assert [e["model_id"] for e in response.json()["entries"]] == [92]

        response = client.get("/leaderboard", params={"subset": "Chess-v0", "per_page": 2})
        data = response.json()
        assert data["total"] == 3
        assert data["total_pages"] == 2
        assert len(data["entries"]) == 2

    def test_invalid_standard(self, client):
        """API-033: Unknown standard filter is rejected."""
        response = client.get("/leaderboard", params={"standard": "Sometimes"})
        assert response.status_code == 400

    def test_empty_subset(self, client):
        """API-034: Unknown subset gives an empty page."""
        response = client.get("/leaderboard", params={"subset": "Nothing"})

        data = response.json()
        assert data["empty"] is True
        assert data["entries"] == []
        assert data["total_pages"] == 1


# =============================================================================
# Error Handling Tests (API-040 to API-042)
# =============================================================================

class TestErrorHandling:
    """Test error mapping."""

    def test_data_source_error(self, client, memory_source):
        """API-040: Upstream failure is a retryable 502."""
        from skillscope.errors import DataSourceError

        memory_source.fail_with = DataSourceError("offline", status_code=503)
        response = client.get("/leaderboard")

        assert response.status_code == 502
        data = response.json()
        assert data["code"] == "DATA_SOURCE_ERROR"
        assert data["retryable"] is True

    def test_non_retryable_error(self, client, memory_source):
        """API-041: retryable flag is passed through."""
        from skillscope.errors import DataSourceError

        memory_source.fail_with = DataSourceError("bad request", status_code=400, retryable=False)
        response = client.get("/skills/model-x")

        assert response.status_code == 502
        assert response.json()["retryable"] is False

    def test_unconfigured_data_source(self, unconfigured_client):
        """API-042: Without Supabase settings data endpoints return 503."""
        response = unconfigured_client.get("/leaderboard")

        assert response.status_code == 503
        assert response.json()["code"] == "CONFIGURATION_ERROR"
