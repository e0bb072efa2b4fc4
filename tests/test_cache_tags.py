import asyncio
import json
import logging

import pytest

import services.cache_tags as cache_tags
from messaging.consumers import handle_cache_tags_message
from messaging.publishers import build_cache_tags_message
from services.cache_tags import CacheTagsInvalidator, TagAwareCache, members_cache_tag, render_cache


def test_members_cache_tag() -> None:
    assert members_cache_tag("t1") == "team:t1:members"


def test_invalidate_tags_drops_only_tagged_items() -> None:
    cache = TagAwareCache()
    cache.set("team_members:t1", ["a@x.com"], ["team:t1:members"])
    cache.set("team_members:t2", ["b@x.com"], ["team:t2:members"])
    cache.set("untagged", 1)

    removed = cache.invalidate_tags(["team:t1:members", "team:t9:members"])

    assert removed == 1
    assert cache.get("team_members:t1") is None
    assert cache.get("team_members:t2") == ["b@x.com"]
    assert cache.get("untagged") == 1


def test_invalidator_clears_the_local_cache() -> None:
    cache = TagAwareCache()
    cache.set("team_members:t1", ["a@x.com"], ["team:t1:members"])

    CacheTagsInvalidator(cache, publish=False).invalidate_tags(["team:t1:members"])

    assert cache.get("team_members:t1") is None


def test_invalidator_publishes_to_the_other_replicas(monkeypatch) -> None:
    published = []

    async def fake_publish(tags):
        published.append(tags)

    monkeypatch.setattr(cache_tags, "publish_cache_tags_invalidated", fake_publish)

    async def invalidate():
        CacheTagsInvalidator(TagAwareCache()).invalidate_tags(["team:t1:members"])
        await asyncio.sleep(0)

    asyncio.run(invalidate())

    assert published == [["team:t1:members"]]


def test_invalidator_without_event_loop_does_not_raise(monkeypatch, caplog) -> None:
    async def fake_publish(tags):
        raise AssertionError("must not be scheduled")

    monkeypatch.setattr(cache_tags, "publish_cache_tags_invalidated", fake_publish)
    caplog.set_level(logging.WARNING, logger="services.cache_tags")
    cache = TagAwareCache()
    cache.set("team_members:t1", ["a@x.com"], ["team:t1:members"])

    CacheTagsInvalidator(cache).invalidate_tags(["team:t1:members"])

    assert cache.get("team_members:t1") is None
    assert "were not published" in caplog.text


def test_cache_tags_message_is_json_serializable() -> None:
    message = build_cache_tags_message(("team:t1:members",))

    assert json.loads(json.dumps(message))["tags"] == ["team:t1:members"]
    assert "invalidated_at" in message


def test_consumer_invalidates_the_local_cache() -> None:
    render_cache.set("team_members:consumer-test", ["a@x.com"], ["team:consumer-test:members"])

    removed = handle_cache_tags_message({"tags": ["team:consumer-test:members"]})

    assert removed == 1
    assert render_cache.get("team_members:consumer-test") is None


def test_consumer_rejects_message_without_tags() -> None:
    with pytest.raises(ValueError):
        handle_cache_tags_message({"tags": "team:t1:members"})


def test_expired_items_are_misses() -> None:
    now = [100.0]
    cache = TagAwareCache(clock=lambda: now[0])
    cache.set("team_members:t1", ["a@x.com"], ["team:t1:members"], max_age=60)
    cache.set("forever", 1)

    now[0] = 159.0
    assert cache.get("team_members:t1") == ["a@x.com"]

    now[0] = 160.0
    assert cache.get("team_members:t1") is None
    assert cache.get("forever") == 1


def test_consumer_rejects_message_that_is_not_an_object() -> None:
    with pytest.raises(ValueError):
        handle_cache_tags_message(["team:t1:members"])
