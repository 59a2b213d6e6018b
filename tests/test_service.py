import json

import pytest

from webworm_api.app.core.errors import DuplicateKeyError, InvalidInputError, NotFoundError
from webworm_api.app.schemas.bookmark import MAX_EPISODE, BookmarkCreate

from conftest import make_entry


def test_insert_from_json_string(service):
    bookmark = service.insert(json.dumps({**make_entry(), "has_new": False}))

    assert bookmark.name == "One Piece"
    assert bookmark.episode == 12
    assert bookmark.url == "https://example.com/watch/episode-12"
    assert bookmark.has_new is False


def test_insert_from_mapping_and_model(service):
    service.insert(make_entry(name="A"))
    service.insert(BookmarkCreate(**make_entry(name="B")))

    assert [b.name for b in service.fetch_bookmarks()] == ["A", "B"]


def test_insert_strips_name(service):
    service.insert(make_entry(name="  One Piece  "))

    assert service.advance(" One Piece ").episode == 13


def test_insert_duplicate(service):
    service.insert(make_entry())

    with pytest.raises(DuplicateKeyError):
        service.insert(make_entry())


@pytest.mark.parametrize(
    "entry",
    [
        "not json",
        json.dumps({"url": "https://example.com/1", "episode": 1}),
        {"name": "", "url": "https://example.com/1", "episode": 1},
        {"name": "x", "url": "   ", "episode": 1},
        {"name": "x", "url": "https://example.com/1", "episode": "1"},
        {"name": "x", "url": "https://example.com/1", "episode": -1},
        {"name": "x", "url": "https://example.com/1", "episode": True},
        {"name": "x", "url": f"https://example.com/{2**64}", "episode": 2**64},
        ["x", "https://example.com/1", 1],
    ],
)
def test_insert_rejects_malformed_entries(service, entry):
    with pytest.raises(InvalidInputError, match="could not load bookmark"):
        service.insert(entry)
    assert service.fetch_bookmarks() == []


def test_insert_requires_episode_in_url(service):
    with pytest.raises(InvalidInputError, match="episode was not found in url"):
        service.insert(make_entry(url="https://example.com/watch/latest"))


@pytest.mark.parametrize("name", ["", "   ", None, 3])
def test_operations_reject_bad_names(service, name):
    for operation in (service.advance, service.previous, service.remove):
        with pytest.raises(InvalidInputError):
            operation(name)


def test_advance_previous_remove(service):
    service.insert(make_entry(episode=1, url="https://example.com/s/1"))

    assert service.advance("One Piece").episode == 2
    assert service.advance("One Piece").episode == 3
    assert service.previous("One Piece").episode == 2

    service.remove("One Piece")
    with pytest.raises(NotFoundError):
        service.advance("One Piece")


def test_fetch_bookmarks_filters(service):
    service.insert(make_entry(name="One Piece"))
    service.insert(make_entry(name="Naruto"))
    service.insert(make_entry(name="One Punch Man"))
    service.advance("Naruto")
    service.advance("One Punch Man")

    assert [b.name for b in service.fetch_bookmarks(["One*"])] == ["One Piece", "One Punch Man"]
    assert [b.name for b in service.fetch_bookmarks(only_new=True)] == ["Naruto", "One Punch Man"]
    assert [b.name for b in service.fetch_bookmarks(["N*", "*Man"], only_new=True)] == [
        "Naruto",
        "One Punch Man",
    ]
    # globs are case sensitive
    assert service.fetch_bookmarks(["one*"]) == []


def test_fetch_does_not_change_flags(service):
    service.insert(make_entry())

    service.fetch_bookmarks()

    assert service.fetch_bookmarks()[0].has_new is False


def test_refresh_flags_available_episodes(service, probe):
    service.insert(make_entry(name="A", episode=1, url="https://example.com/a/1"))
    service.insert(make_entry(name="B", episode=7, url="https://example.com/b/7"))
    service.insert(make_entry(name="C", episode=3, url="https://example.com/c/3"))
    service.advance("C")
    probe.available = {"https://example.com/a/2", "https://example.com/c/5"}

    refreshed = service.refresh()

    assert [b.name for b in refreshed] == ["A"]
    assert refreshed[0].episode == 1
    # C already has a new episode and is not probed
    assert probe.calls == ["https://example.com/a/2", "https://example.com/b/8"]
    assert {b.name: b.has_new for b in service.fetch_bookmarks()} == {"A": True, "B": False, "C": True}


def test_refresh_with_patterns(service, probe):
    service.insert(make_entry(name="A", episode=1, url="https://example.com/a/1"))
    service.insert(make_entry(name="B", episode=1, url="https://example.com/b/1"))
    probe.available = {"https://example.com/a/2", "https://example.com/b/2"}

    assert [b.name for b in service.refresh(["B"])] == ["B"]
    assert probe.calls == ["https://example.com/b/2"]


def test_advance_available(service, probe):
    service.insert(make_entry(name="A", episode=1, url="https://example.com/a/1"))
    service.insert(make_entry(name="B", episode=1, url="https://example.com/b/1"))
    probe.available = {"https://example.com/b/2"}

    advanced = service.advance_available()

    assert [(b.name, b.episode) for b in advanced] == [("B", 2)]
    assert [b.episode for b in service.fetch_bookmarks()] == [1, 2]


def test_last_possible_episode_is_never_probed(service, probe):
    service.insert(make_entry(episode=MAX_EPISODE))
    probe.available = {f"https://example.com/watch/episode-{MAX_EPISODE + 1}"}

    assert service.advance_available() == []
    assert service.refresh() == []
    assert probe.calls == []
    with pytest.raises(InvalidInputError):
        service.advance("One Piece")
    assert service.fetch_bookmarks()[0].episode == MAX_EPISODE
