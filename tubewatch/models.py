import datetime as dt
import re
from dataclasses import dataclass
from typing import Optional

RFC3339_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


@dataclass
class Video:
    id: str
    title: str
    published: str
    channel_id: str = ""


@dataclass
class ChannelStats:
    channel: str
    fetched: int = 0
    archived: int = 0
    skipped: int = 0
    failed: int = 0
    error: Optional[str] = None

    def summary(self) -> str:
        line = (
            f"Channel [{self.channel}] stats: fetched:{self.fetched} "
            f"archived:{self.archived} skipped:{self.skipped} failed:{self.failed}"
        )
        if self.error:
            line += f" error:'{self.error}'"
        return line


def escape_title(title: str) -> str:
    return title.replace("\n", "\\n")


def unescape_title(title: str) -> str:
    # lossy: a title that really contained backslash-n comes back as a newline
    return title.replace("\\n", "\n")


def parse_published(value: str) -> dt.datetime:
    text = str(value or "").strip()
    if not RFC3339_RE.match(text):
        raise ValueError(f"not an RFC3339 timestamp: {value!r}")
    return dt.datetime.fromisoformat(text.upper().replace("Z", "+00:00"))


def published_month(video: Video, tz: Optional[dt.tzinfo] = None) -> str:
    published = parse_published(video.published)
    return published.astimezone(tz).strftime("%Y-%m")
