from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from webapp.api.deps import AppResources

NO_CACHE = {
    "cache-control": "no-cache, no-store, must-revalidate",
    "pragma": "no-cache",
    "x-content-type-options": "nosniff",
}


def _assert_no_cache(headers) -> None:
    for name, value in NO_CACHE.items():
        assert headers.get(name) == value


def test_healthz_returns_200_with_no_cache_headers(client: TestClient, resources: AppResources) -> None:
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.text == ""
    _assert_no_cache(r.headers)
    assert len(resources.health_repo.rows) == 1


def test_each_check_writes_a_new_row(client: TestClient, resources: AppResources) -> None:
    for _ in range(3):
        assert client.get("/healthz").status_code == 200
    assert [row.check_id for row in resources.health_repo.rows] == [1, 2, 3]


def test_healthz_with_query_params_returns_400(client: TestClient, resources: AppResources) -> None:
    r = client.get("/healthz?Key=1")
    assert r.status_code == 400
    assert r.text == ""
    _assert_no_cache(r.headers)
    assert resources.health_repo.rows == []


@pytest.mark.parametrize("header", ["Authorization", "Authentication"])
def test_healthz_with_auth_header_returns_400(client: TestClient, header: str) -> None:
    r = client.get("/healthz", headers={header: "Bearer adsf"})
    assert r.status_code == 400
    assert r.text == ""


def test_healthz_with_empty_json_payload_returns_400(client: TestClient) -> None:
    r = client.request("GET", "/healthz", json={})
    assert r.status_code == 400
    assert r.text == ""


def test_healthz_with_json_payload_returns_400(client: TestClient) -> None:
    r = client.request("GET", "/healthz", json={"checkId": 1})
    assert r.status_code == 400
    assert r.text == ""


def test_healthz_with_raw_text_payload_returns_400(client: TestClient) -> None:
    r = client.request("GET", "/healthz", content=b"sdkhsakfh")
    assert r.status_code == 400
    assert r.text == ""


def test_healthz_returns_503_when_insert_fails(client: TestClient, resources: AppResources) -> None:
    resources.health_repo.fail = True
    r = client.get("/healthz")
    assert r.status_code == 503
    assert r.text == ""
    _assert_no_cache(r.headers)
    assert "api.healthz.error" in resources.metrics.counters


def test_healthz_records_metrics(client: TestClient, resources: AppResources) -> None:
    client.get("/healthz")
    assert resources.metrics.counters == ["api.healthz.count"]
    assert "api.healthz.db_duration" in resources.metrics.timing_names
    assert "api.healthz.duration" in resources.metrics.timing_names


@pytest.mark.parametrize("method", ["HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"])
def test_other_methods_return_405(client: TestClient, resources: AppResources, method: str) -> None:
    r = client.request(method, "/healthz")
    assert r.status_code == 405
    assert r.text == ""
    assert r.headers.get("allow") == "GET"
    _assert_no_cache(r.headers)
    assert resources.health_repo.rows == []


@pytest.mark.parametrize(
    "path",
    ["/health", "/", "/healthz/extra", "/v2/file", "/healthz/", "/v1/file/", "/v1/file/abc/"],
)
def test_unknown_path_returns_404(client: TestClient, path: str) -> None:
    r = client.get(path, follow_redirects=False)
    assert r.status_code == 404
    assert r.text == ""
