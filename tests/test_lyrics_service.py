import asyncio

import pytest
import requests

from services.lyrics_service import LYRICS_NOT_FOUND, LyricsService


class FakeResponse:
    def __init__(self, payload=None, status=200, invalid_json=False):
        self.payload = payload
        self.status = status
        self.invalid_json = invalid_json

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.invalid_json:
            raise ValueError("no json")
        return self.payload


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error:
            raise self.error
        return self.response


def service_with(**kwargs):
    http = FakeHttp(**kwargs)
    return LyricsService(base_url="https://lyrics.test/v1", timeout=2.0, session=http), http


def test_url_encodes_artist_and_title():
    service = LyricsService(base_url="https://lyrics.test/v1/")
    assert service.lyrics_url("AC/DC", "T.N.T & more") == "https://lyrics.test/v1/AC%2FDC/T.N.T%20%26%20more"


def test_returns_stripped_lyrics():
    service, http = service_with(response=FakeResponse({"lyrics": "\n  la la la \n"}))

    assert service.fetch_lyrics("Artist", "Song") == "la la la"
    assert http.calls == [("https://lyrics.test/v1/Artist/Song", 2.0)]


@pytest.mark.parametrize("response", [
    FakeResponse({"error": "No lyrics found"}, status=404),
    FakeResponse({"lyrics": ""}),
    FakeResponse({"lyrics": None}),
    FakeResponse(["unexpected"]),
    FakeResponse(invalid_json=True),
])
def test_bad_responses_give_sentinel(response):
    service, _ = service_with(response=response)
    assert service.fetch_lyrics("Artist", "Song") == LYRICS_NOT_FOUND


def test_transport_failure_gives_sentinel():
    service, _ = service_with(error=requests.ConnectionError("offline"))
    assert service.fetch_lyrics("Artist", "Song") == "Lyrics not found"


def test_default_client_is_requests(monkeypatch):
    calls = []

    def fake_get(url, timeout=None):
        calls.append(url)
        return FakeResponse({"lyrics": "words"})

    monkeypatch.setattr(requests, "get", fake_get)
    service = LyricsService(base_url="https://lyrics.test/v1")

    assert service.fetch_lyrics("A", "B") == "words"
    assert calls == ["https://lyrics.test/v1/A/B"]


def test_unknown_artist_skips_lookup():
    service, http = service_with(response=FakeResponse({"lyrics": "words"}))

    assert asyncio.run(service.get_lyrics("Unknown Artist", "Song")) is None
    assert asyncio.run(service.get_lyrics("", "Song")) is None
    assert http.calls == []


def test_get_lyrics_runs_fetch():
    service, _ = service_with(response=FakeResponse({"lyrics": "words"}))
    assert asyncio.run(service.get_lyrics("Artist", "Song")) == "words"


def test_environment_configuration(monkeypatch):
    monkeypatch.setenv("FOLDERPLAY_LYRICS_URL", "https://mirror.test/api/")
    monkeypatch.setenv("FOLDERPLAY_LYRICS_TIMEOUT", "3.5")
    service = LyricsService()

    assert service.base_url == "https://mirror.test/api"
    assert service.timeout == 3.5


def test_invalid_timeout_falls_back(monkeypatch):
    monkeypatch.setenv("FOLDERPLAY_LYRICS_TIMEOUT", "soon")
    assert LyricsService().timeout == 10.0
