import logging
import time

import pytest

from tubewatch.infra.youtube_feed import FeedError
from tubewatch.models import Video


class FakeFeedClient:
    def __init__(self, feeds=None, failing=()):
        self.feeds = feeds or {}
        self.failing = set(failing)
        self.calls = []

    def get_channel_videos(self, channel_id):
        self.calls.append(channel_id)
        if channel_id in self.failing:
            raise FeedError(f"fetch failed for {channel_id}")
        return [
            Video(id=v.id, title=v.title, published=v.published, channel_id=channel_id)
            for v in self.feeds.get(channel_id, [])
        ]


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch):
    # month scoping uses the local zone; pin it so file names are predictable
    monkeypatch.setenv("TZ", "UTC")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def logger():
    log = logging.getLogger("tubewatch.test")
    log.setLevel(logging.DEBUG)
    return log


@pytest.fixture
def make_video():
    def _make(id, title, published="2024-03-15T10:00:00Z", channel_id="UC1"):
        return Video(id=id, title=title, published=published, channel_id=channel_id)
    return _make


@pytest.fixture
def fake_client():
    return FakeFeedClient
