"""Dedup policies.

The monthly file archive and the relational store decide "already seen"
differently: the archive compares escaped titles inside one channel-month,
the table compares raw video ids globally. Keep them as separate policies.
"""
from typing import Iterable

from tubewatch.models import Video, escape_title


class DedupPolicy:
    name = ""

    def key(self, video: Video) -> str:
        raise NotImplementedError

    def seen(self, keys: Iterable[str], video: Video) -> bool:
        return self.key(video) in keys


class ByEscapedTitle(DedupPolicy):
    # Distinct ids sharing a title in the same month collapse into one entry.
    name = "escaped-title"

    def key(self, video: Video) -> str:
        return escape_title(video.title)


class ByIdentifier(DedupPolicy):
    name = "identifier"

    def key(self, video: Video) -> str:
        return video.id
