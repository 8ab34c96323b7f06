"""Tests for the FastAPI app."""

import pytest
from fastapi.testclient import TestClient

from firstcalls.overpass import OverpassClient
from firstcalls.web import app as web_app

from conftest import make_service


class StubOverpassClient:
    def __init__(self, services):
        self.services = services
        self.calls = 0

    def fetch_services(self, categories):
        self.calls += 1
        return list(self.services)

    def close(self):
        pass


@pytest.fixture
def stub(monkeypatch, services):
    stub = StubOverpassClient(services + [make_service(4, "fire_station", 23.78, 90.42)])
    monkeypatch.setattr(web_app, "overpass_client", stub)
    monkeypatch.setattr(web_app, "services_cache", None)
    monkeypatch.setattr(web_app, "finder", None)
    return stub


@pytest.fixture
def client(stub):
    return TestClient(web_app.app)


class TestCategories:
    def test_all_enabled(self, client):
        response = client.get("/api/categories")
        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body] == ["hospital", "police", "fire_station"]
        assert all(c["enabled"] for c in body)

    def test_filter(self, client):
        body = client.get("/api/categories", params={"categories": "police"}).json()
        assert [c["enabled"] for c in body] == [False, True, False]


class TestServices:
    def test_all(self, client, stub):
        body = client.get("/api/services").json()
        assert [s["id"] for s in body] == ["1", "2", "3", "4"]
        assert stub.calls == 1

    def test_cached(self, client, stub):
        client.get("/api/services")
        client.get("/api/services")
        assert stub.calls == 1

    def test_refresh(self, client, stub):
        client.get("/api/services")
        client.get("/api/services", params={"refresh": "true"})
        assert stub.calls == 2

    def test_filtered(self, client):
        body = client.get("/api/services", params={"categories": "hospital"}).json()
        assert {s["type"] for s in body} == {"hospital"}

    def test_empty_fetch_not_cached(self, client, stub):
        stub.services = []
        assert client.get("/api/services").json() == []
        stub.services = [make_service(1, "hospital", 23.8, 90.4)]
        assert len(client.get("/api/services").json()) == 1
        assert stub.calls == 2

    def test_malformed_overpass_payload(self, stub, monkeypatch):
        class NullElementsSession:
            def post(self, url, data=None, headers=None, timeout=None):
                return self

            def raise_for_status(self):
                pass

            def json(self):
                return {"elements": None}

            def close(self):
                pass

        monkeypatch.setattr(
            web_app, "overpass_client", OverpassClient(session=NullElementsSession())
        )
        response = TestClient(web_app.app).get("/api/services")
        assert response.status_code == 200
        assert response.json() == []


class TestClosest:
    def test_ranking(self, client):
        response = client.get("/api/closest", params={"lat": 23.8103, "lon": 90.4125})
        assert response.status_code == 200
        body = response.json()
        assert [r["rank"] for r in body] == [1, 2, 3]
        distances = [r["distance_km"] for r in body]
        assert distances == sorted(distances)
        assert body[0]["service"]["id"] == "3"
        assert body[0]["directions_url"].startswith("https://www.google.com/maps/dir/23.8103,90.4125/")

    def test_category_filter(self, client):
        body = client.get(
            "/api/closest", params={"lat": 23.8103, "lon": 90.4125, "categories": "hospital"}
        ).json()
        assert [(r["category"]["id"], r["service"]["id"]) for r in body] == [("hospital", "1")]

    def test_missing_location(self, client):
        response = client.get("/api/closest")
        assert response.status_code == 422
        assert "Unable to get your location" in response.json()["detail"]

    def test_out_of_range_location(self, client):
        response = client.get("/api/closest", params={"lat": 123, "lon": 90})
        assert response.status_code == 422

    def test_no_services(self, client, stub):
        stub.services = []
        body = client.get("/api/closest", params={"lat": 23.8, "lon": 90.4}).json()
        assert body == []


class TestNearby:
    def test_hospitals(self, client):
        body = client.get(
            "/api/nearby", params={"lat": 23.8103, "lon": 90.4125, "category": "hospital", "k": 2}
        ).json()
        assert [r["service"]["id"] for r in body] == ["1", "2"]
        assert body[0]["category"]["id"] == "hospital"

    def test_unknown_category(self, client):
        response = client.get(
            "/api/nearby", params={"lat": 23.8, "lon": 90.4, "category": "pharmacy"}
        )
        assert response.status_code == 404


class TestStats:
    def test_counts(self, client):
        body = client.get("/api/stats").json()
        assert body == {
            "counts": {"hospital": 2, "police": 1, "fire_station": 1},
            "total": 4,
        }


def test_health(client):
    client.get("/api/services")
    body = client.get("/health").json()
    assert body["status"] == "ok"
    assert body["services_count"] == 4
