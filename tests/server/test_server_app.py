"""Tests for the HTTP JSON API."""

import pytest
from starlette.testclient import TestClient

from hotspot_lens import __version__
from hotspot_lens.config import HotspotConfig
from hotspot_lens.exceptions import (
    AuthenticationRequiredError,
    InvalidConfigError,
    InvalidTimeWindowError,
    NotAGitRepositoryError,
    RepositoryNotFoundError,
    SourceUnavailableError,
)
from hotspot_lens.server import create_app
from hotspot_lens.server.app import error_status


@pytest.fixture
def client():
    return TestClient(create_app(HotspotConfig(cache_enabled=False)))


@pytest.fixture
def history(patch_open_source, live_source):
    patch_open_source(live_source)
    return live_source


class TestHealth:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "version": __version__}


class TestHotspots:
    def test_default_request(self, client, history):
        resp = client.get("/api/hotspots", params={"repo": "acme/app"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["ref"] == "HEAD"
        assert data["timeWindow"] == 30
        assert data["analyzedAt"].endswith("Z")
        assert [f["path"] for f in data["files"]] == ["foo.ts"]
        assert data["files"][0]["hotspotScore"] == 92.0

    def test_parameters_forwarded(self, client, history):
        resp = client.get(
            "/api/hotspots", params={"repo": "acme/app", "ref": "main", "timeWindow": "90"}
        )
        data = resp.json()
        assert data["ref"] == "main"
        assert len(data["files"]) == 2

    def test_sort_by_churn(self, client, history):
        resp = client.get(
            "/api/hotspots", params={"repo": "acme/app", "timeWindow": "90", "sortBy": "churn"}
        )
        assert [f["path"] for f in resp.json()["files"]] == ["bar.ts", "foo.ts"]

    def test_empty_for_unknown_ref(self, client, patch_open_source, fake_source):
        patch_open_source(fake_source([], {}, missing_refs={"gone"}))
        resp = client.get("/api/hotspots", params={"repo": "acme/app", "ref": "gone"})
        assert resp.status_code == 200
        assert resp.json()["files"] == []

    @pytest.mark.parametrize(
        "params",
        [
            {},
            {"repo": "acme/app", "timeWindow": "abc"},
            {"repo": "acme/app", "timeWindow": "0"},
            {"repo": "acme/app", "source": "svn"},
            {"repo": "acme/app", "sortBy": "age"},
        ],
    )
    def test_bad_request(self, client, history, params):
        resp = client.get("/api/hotspots", params=params)
        assert resp.status_code == 400
        assert resp.json()["error"] == "bad_request"

    @pytest.mark.parametrize(
        "error,status,kind",
        [
            (AuthenticationRequiredError("acme/app"), 401, "authentication_required"),
            (RepositoryNotFoundError("acme/app"), 404, "not_found"),
            (NotAGitRepositoryError("/srv/app"), 422, "not_a_repository"),
            (SourceUnavailableError("offline"), 502, "unavailable"),
        ],
    )
    def test_source_errors(self, client, patch_open_source, fake_source, error, status, kind):
        patch_open_source(fake_source([], {}, validate_error=error))
        resp = client.get("/api/hotspots", params={"repo": "acme/app"})
        assert resp.status_code == status
        body = resp.json()
        assert body["error"] == kind
        assert body["message"] == str(error)

    def test_error_body_carries_details(self, client, patch_open_source, fake_source):
        error = AuthenticationRequiredError("acme/app", "token expired")
        patch_open_source(fake_source([], {}, validate_error=error))
        resp = client.get("/api/hotspots", params={"repo": "acme/app"})
        assert resp.status_code == 401
        assert resp.json()["details"] == {"reason": "token expired"}

    def test_config_error_is_bad_request(self, client, patch_open_source, fake_source):
        error = InvalidConfigError("workers", 0, "must be at least 1")
        patch_open_source(fake_source([], {}, validate_error=error))
        resp = client.get("/api/hotspots", params={"repo": "acme/app"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_config"


class TestFileHotspot:
    def test_found(self, client, history):
        resp = client.get("/api/hotspots/file", params={"repo": "acme/app", "path": "foo.ts"})
        assert resp.status_code == 200
        assert resp.json()["changeCount"] == 2

    def test_not_a_hotspot(self, client, history):
        resp = client.get("/api/hotspots/file", params={"repo": "acme/app", "path": "bar.ts"})
        assert resp.status_code == 404
        assert resp.json()["error"] == "not_a_hotspot"

    def test_path_required(self, client, history):
        resp = client.get("/api/hotspots/file", params={"repo": "acme/app"})
        assert resp.status_code == 400


class TestErrorStatus:
    def test_analysis_errors_are_client_errors(self):
        assert error_status(InvalidTimeWindowError(0)) == 400
