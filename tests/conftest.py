"""Shared fixtures for gpmdp_rc tests."""

import json

import pytest


class FakeTransport:
    """Records what a session sends instead of writing to a socket."""

    def __init__(self):
        self.sent = []
        self.closed = False

    def send(self, text):
        self.sent.append(json.loads(text))

    def close(self):
        self.closed = True


def channel(label, payload):
    """Inbound broadcast frame."""
    return json.dumps({"channel": label, "payload": payload})


def response(value, request_id=13):
    """Inbound correlated response frame."""
    return json.dumps({"requestID": request_id, "value": value})


def track(artist, album, title):
    return {"artist": artist, "album": album, "title": title, "id": f"{artist}-{title}"}


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def output():
    """List the session's echo callable appends to."""
    return []


@pytest.fixture
def queue_tracks():
    return [
        track("Radiohead", "OK Computer", "Airbag"),
        track("Khruangbin", "Con Todo El Mundo", "Maria Tambien"),
        track("Miles Davis", "Kind of Blue", "So What"),
    ]


@pytest.fixture
def search_results():
    """Two artists, one album, three tracks."""
    return {
        "searchText": "blue",
        "artists": [
            {"id": "a1", "name": "Miles Davis"},
            {"id": "a2", "name": "Blue Note Quartet"},
        ],
        "albums": [
            {"id": "b1", "name": "Kind of Blue", "artist": "Miles Davis"},
        ],
        "tracks": [
            track("Miles Davis", "Kind of Blue", "Blue in Green"),
            track("Joni Mitchell", "Blue", "River"),
            track("Eiffel 65", "Europop", "Blue"),
        ],
    }
