"""Tests for the command bridge used by the desktop frontend."""

import json

from conftest import make_entry


def invoke(client, command, args=None):
    return client.post(f"/api/v1/invoke/{command}", json=args)


def test_insert_with_encoded_entry(client):
    entry = json.dumps({**make_entry(), "has_new": False})

    response = invoke(client, "insert", {"entry": entry})

    assert response.status_code == 200
    assert response.json() == {
        "name": "One Piece",
        "url": "https://example.com/watch/episode-12",
        "episode": 12,
        "has_new": False,
    }


def test_insert_with_object_entry(client):
    response = invoke(client, "insert", {"entry": make_entry()})

    assert response.status_code == 200
    assert response.json()["name"] == "One Piece"


def test_insert_errors_carry_message(client):
    invoke(client, "insert", {"entry": json.dumps(make_entry())})

    duplicate = invoke(client, "insert", {"entry": json.dumps(make_entry())})
    garbage = invoke(client, "insert", {"entry": "{not json"})
    missing = invoke(client, "insert", {})

    assert duplicate.status_code == 409
    assert duplicate.json()["detail"] == "the name One Piece already exists"
    assert garbage.status_code == 422
    assert garbage.json()["detail"].startswith("could not load bookmark from")
    assert missing.status_code == 422
    assert missing.json()["detail"] == "missing argument 'entry'"


def test_fetch_advance_previous_remove(client):
    invoke(client, "insert", {"entry": make_entry(name="A", episode=3, url="https://example.com/a/3")})
    invoke(client, "insert", {"entry": make_entry(name="B", episode=0, url="https://example.com/b/0")})

    advanced = invoke(client, "advance", {"name": "A"}).json()
    clamped = invoke(client, "previous", {"name": "B"}).json()
    listing = invoke(client, "fetch_bookmarks").json()

    assert advanced == {"name": "A", "url": "https://example.com/a/4", "episode": 4, "has_new": True}
    assert clamped == {"name": "B", "url": "https://example.com/b/0", "episode": 0, "has_new": False}
    assert listing == [advanced, clamped]

    removed = invoke(client, "remove", {"name": "A"})
    assert removed.status_code == 200
    assert removed.json() is None
    assert invoke(client, "remove", {"name": "A"}).status_code == 404
    assert [b["name"] for b in invoke(client, "fetch_bookmarks", {}).json()] == ["B"]


def test_refresh(client, probe):
    invoke(client, "insert", {"entry": make_entry(name="A", episode=3, url="https://example.com/a/3")})
    probe.available = {"https://example.com/a/4"}

    response = invoke(client, "refresh", {"globs": ["A"]})

    assert [b["name"] for b in response.json()] == ["A"]


def test_bad_arguments(client):
    assert invoke(client, "advance", {}).json() == {"detail": "missing argument 'name'"}
    assert invoke(client, "advance", {"name": ""}).status_code == 422
    assert invoke(client, "advance", {"name": 5}).status_code == 422

    for globs in (5, "One*", [1]):
        response = invoke(client, "refresh", {"globs": globs})
        assert response.status_code == 422
        assert response.json()["detail"].startswith("invalid refresh arguments: globs")

    huge = make_entry(episode=2**64, url=f"https://example.com/ep/{2**64}")
    response = invoke(client, "insert", {"entry": huge})
    assert response.status_code == 422
    assert invoke(client, "fetch_bookmarks").json() == []


def test_unknown_command(client):
    response = invoke(client, "drop_everything", {})

    assert response.status_code == 404
    assert response.json() == {"detail": "unknown command drop_everything"}
