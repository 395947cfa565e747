from __future__ import annotations

import urllib.parse
import urllib.request
import xml.etree.ElementTree as ET

import feedparser

from tubewatch.models import Video


FEED_URL = "https://www.youtube.com/feeds/videos.xml?channel_id={channel_id}"
VIDEO_ID_PREFIX = "yt:video:"
ATOM_NS = "{http://www.w3.org/2005/Atom}"


class FeedError(RuntimeError):
    pass


def _raw_titles(payload: bytes) -> list[str]:
    # feedparser strips titles; the archive needs them exactly as published
    root = ET.fromstring(payload)
    return [el.findtext(ATOM_NS + "title") or "" for el in root.findall(ATOM_NS + "entry")]


def parse_feed(payload: bytes, channel_id: str) -> list[Video]:
    parsed = feedparser.parse(payload)
    error = parsed.get("bozo_exception")
    if parsed.get("bozo") and not isinstance(error, feedparser.CharacterEncodingOverride):
        raise FeedError(f"频道 {channel_id} 的 feed 无法解析: {error}")

    entries = list(parsed.get("entries") or [])
    try:
        titles = _raw_titles(payload)
    except ET.ParseError as e:
        raise FeedError(f"频道 {channel_id} 的 feed 无法解析: {e}") from e
    if len(titles) != len(entries):
        raise FeedError(f"频道 {channel_id} 的 feed 条目数不一致: {len(titles)} != {len(entries)}")

    videos = []
    for entry, title in zip(entries, titles):
        raw_id = str(entry.get("id") or "").strip()
        video_id = raw_id[len(VIDEO_ID_PREFIX):] if raw_id.startswith(VIDEO_ID_PREFIX) else raw_id
        videos.append(
            Video(
                id=video_id,
                title=title,
                published=str(entry.get("published") or ""),
                channel_id=channel_id,
            )
        )
    return videos


class YouTubeFeedClient:
    def __init__(self, proxy: str | None = None, timeout: int = 20):
        self.proxy = proxy or None
        self.timeout = timeout

    def _opener(self):
        if not self.proxy:
            return urllib.request.build_opener()
        return urllib.request.build_opener(
            urllib.request.ProxyHandler({"http": self.proxy, "https": self.proxy})
        )

    def get_feed(self, url: str) -> bytes:
        req = urllib.request.Request(
            url,
            headers={
                "Accept": "application/atom+xml, application/xml",
                "User-Agent": "tubewatch/1.0",
            },
        )
        try:
            with self._opener().open(req, timeout=self.timeout) as resp:
                return resp.read()
        except Exception as e:
            raise FeedError(f"feed 请求失败 ({url}): {e}") from e

    def get_channel_videos(self, channel_id: str) -> list[Video]:
        channel_id = str(channel_id or "").strip()
        if not channel_id:
            raise FeedError("频道ID为空")
        url = FEED_URL.format(channel_id=urllib.parse.quote(channel_id))
        return parse_feed(self.get_feed(url), channel_id)
