"""Tests for the Flask web UI."""

from __future__ import annotations

import pytest

from abilities.weather import NotFound, Unauthorized, Unreachable
from router import SESSION_KEY
from web import create_app

from .conftest import FakeFetch


@pytest.fixture
def client(fake_fetch):
    app = create_app(fetch=fake_fetch)
    app.config["TESTING"] = True
    return app.test_client()


def _client_for(fetch: FakeFetch):
    app = create_app(fetch=fetch)
    app.config["TESTING"] = True
    return app.test_client()


def _stage(client, city: str) -> None:
    with client.session_transaction() as sess:
        sess[SESSION_KEY] = city


class TestEntryPage:
    def test_form_renders(self, client) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert 'name="city"' in resp.get_data(as_text=True)

    @pytest.mark.parametrize("city", ["", "   "])
    def test_blank_submission_shows_error(self, client, fake_fetch, city) -> None:
        resp = client.post("/", data={"city": city})

        assert resp.status_code == 200
        assert "Please enter a city name." in resp.get_data(as_text=True)
        with client.session_transaction() as sess:
            assert SESSION_KEY not in sess
        assert fake_fetch.calls == []

    def test_submission_stages_city_and_redirects(self, client, fake_fetch) -> None:
        resp = client.post("/", data={"city": "  Paris "})

        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/weather")
        with client.session_transaction() as sess:
            assert sess[SESSION_KEY] == "Paris"
        assert fake_fetch.calls == []


class TestResultPage:
    def test_without_city_redirects_to_entry(self, client, fake_fetch) -> None:
        resp = client.get("/weather")

        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/")
        assert fake_fetch.calls == []

    def test_renders_reading(self, client, fake_fetch) -> None:
        _stage(client, "Paris")

        resp = client.get("/weather")

        body = resp.get_data(as_text=True)
        assert resp.status_code == 200
        assert "Paris, FR" in body
        assert "20.0°C / 68.0°F" in body
        assert "81%" in body
        assert "3.6 m/s" in body
        assert "broken clouds" in body
        assert fake_fetch.calls == ["Paris"]

    def test_every_visit_refetches(self, client, fake_fetch) -> None:
        _stage(client, "Paris")

        client.get("/weather")
        client.get("/weather")

        assert fake_fetch.calls == ["Paris", "Paris"]

    @pytest.mark.parametrize(
        ("error", "message"),
        [
            (NotFound("Atlantis"), "City not found! Try another city."),
            (Unauthorized(), "Invalid API key."),
            (Unreachable(), "Failed to fetch weather data. Try again later."),
        ],
    )
    def test_renders_error(self, error, message) -> None:
        client = _client_for(FakeFetch(error))
        _stage(client, "Atlantis")

        resp = client.get("/weather")

        assert resp.status_code == 200
        assert message in resp.get_data(as_text=True)

    def test_back_returns_to_entry(self, client) -> None:
        _stage(client, "Paris")

        resp = client.post("/weather/back")

        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/")

    def test_back_without_staged_city(self, client, fake_fetch) -> None:
        resp = client.post("/weather/back")

        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/")
        assert fake_fetch.calls == []

    def test_page_is_rendered_after_the_fetch_settles(self, client) -> None:
        _stage(client, "Paris")

        body = client.get("/weather").get_data(as_text=True)

        assert "Loading" not in body
        assert "68.0°F" in body

    def test_full_flow(self, client, fake_fetch) -> None:
        resp = client.post("/", data={"city": "Paris"}, follow_redirects=True)

        assert resp.status_code == 200
        assert "68.0°F" in resp.get_data(as_text=True)
        assert fake_fetch.calls == ["Paris"]


class TestApi:
    def test_success(self, client, fake_fetch) -> None:
        resp = client.post("/api/weather", json={"city": " Paris "})

        data = resp.get_json()
        assert resp.status_code == 200
        assert data["state"] == "success"
        assert data["city"] == "Paris"
        assert data["reading"]["fahrenheit"] == 68.0
        assert data["error"] is None
        assert fake_fetch.calls == ["Paris"]

    @pytest.mark.parametrize("body", [{}, {"city": "  "}, {"city": 42}, ["Paris"]])
    def test_invalid_city(self, client, fake_fetch, body) -> None:
        resp = client.post("/api/weather", json=body)

        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Please enter a city name."}
        assert fake_fetch.calls == []

    def test_provider_error(self) -> None:
        client = _client_for(FakeFetch(NotFound("Atlantis")))

        resp = client.post("/api/weather", json={"city": "Atlantis"})

        data = resp.get_json()
        assert data["state"] == "error"
        assert data["error"] == "City not found! Try another city."
        assert data["reading"] is None
