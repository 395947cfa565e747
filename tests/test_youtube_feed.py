import urllib.error

import pytest

from tubewatch.infra.youtube_feed import FeedError, YouTubeFeedClient, parse_feed

FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns:yt="http://www.youtube.com/xml/schemas/2015" xmlns:media="http://search.yahoo.com/mrss/" xmlns="http://www.w3.org/2005/Atom">
 <link rel="self" href="http://www.youtube.com/feeds/videos.xml?channel_id=UC1"/>
 <id>yt:channel:UC1</id>
 <yt:channelId>UC1</yt:channelId>
 <title>Some Channel</title>
 <published>2019-01-01T00:00:00+00:00</published>
 <entry>
  <id>yt:video:vid002</id>
  <yt:videoId>vid002</yt:videoId>
  <yt:channelId>UC1</yt:channelId>
  <title>Show Ep2</title>
  <link rel="alternate" href="https://www.youtube.com/watch?v=vid002"/>
  <published>2024-03-02T10:00:00+00:00</published>
  <updated>2024-03-02T11:00:00+00:00</updated>
 </entry>
 <entry>
  <id>yt:video:vid001</id>
  <yt:videoId>vid001</yt:videoId>
  <yt:channelId>UC1</yt:channelId>
  <title>Show Ep1</title>
  <link rel="alternate" href="https://www.youtube.com/watch?v=vid001"/>
  <published>2024-03-01T10:00:00+00:00</published>
  <updated>2024-03-01T11:00:00+00:00</updated>
 </entry>
</feed>
"""


def test_parse_feed_keeps_order_and_strips_prefix():
    videos = parse_feed(FEED, "UC1")
    assert [(v.id, v.title, v.published, v.channel_id) for v in videos] == [
        ("vid002", "Show Ep2", "2024-03-02T10:00:00+00:00", "UC1"),
        ("vid001", "Show Ep1", "2024-03-01T10:00:00+00:00", "UC1"),
    ]


def test_parse_feed_rejects_garbage():
    with pytest.raises(FeedError):
        parse_feed(b"<html><body>500 oops", "UC1")


def test_truncated_feed_returns_nothing():
    cut = FEED.index(b"</entry>") + len(b"</entry>")
    truncated = FEED[:cut] + b"\n <entry>\n  <id>yt:video:vid001</id>\n  <title>Sho"
    with pytest.raises(FeedError):
        parse_feed(truncated, "UC1")


def test_titles_are_kept_verbatim():
    payload = FEED.replace(b"<title>Show Ep2</title>", b"<title>  Show\nEp2 &amp; co  </title>")
    videos = parse_feed(payload, "UC1")
    assert videos[0].title == "  Show\nEp2 & co  "
    assert videos[1].title == "Show Ep1"


def test_channel_without_videos_is_empty():
    payload = FEED[:FEED.index(b" <entry>")] + b"</feed>\n"
    assert parse_feed(payload, "UC1") == []


def test_client_returns_parsed_videos(monkeypatch):
    client = YouTubeFeedClient()
    seen = []

    def fake_get_feed(url):
        seen.append(url)
        return FEED

    monkeypatch.setattr(client, "get_feed", fake_get_feed)
    videos = client.get_channel_videos("UC1")
    assert seen == ["https://www.youtube.com/feeds/videos.xml?channel_id=UC1"]
    assert len(videos) == 2


def test_network_errors_become_feed_errors(monkeypatch):
    client = YouTubeFeedClient(proxy="http://127.0.0.1:9")

    class BrokenOpener:
        def open(self, req, timeout=None):
            raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(client, "_opener", lambda: BrokenOpener())
    with pytest.raises(FeedError):
        client.get_channel_videos("UC1")


def test_empty_channel_id_fails_without_request(monkeypatch):
    client = YouTubeFeedClient()
    monkeypatch.setattr(client, "get_feed", lambda url: pytest.fail("should not fetch"))
    with pytest.raises(FeedError):
        client.get_channel_videos("  ")


def test_proxy_handler_is_installed():
    opener = YouTubeFeedClient(proxy="http://127.0.0.1:7890")._opener()
    proxies = [h.proxies for h in opener.handlers if hasattr(h, "proxies")]
    assert {"http": "http://127.0.0.1:7890", "https": "http://127.0.0.1:7890"} in proxies
