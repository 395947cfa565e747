import os
import tempfile
from pathlib import Path

from tubewatch.models import Video, escape_title, parse_published


def _sort_key(video: Video):
    # parsable timestamps ascending (ties by id), then unparsable ones by id
    try:
        return (0, parse_published(video.published), video.id)
    except ValueError:
        return (1, None, video.id)


def sort_videos(videos: list[Video]) -> list[Video]:
    return sorted(videos, key=_sort_key)


class MonthlyArchiveStore:
    """One plain-text file per channel per month: <destination>/<channel>/<YYYY-MM>.txt"""

    def __init__(self, destination: str):
        self.destination = Path(destination)

    def channel_dir(self, channel: str) -> Path:
        return self.destination / channel

    def ensure_channel_dir(self, channel: str) -> Path:
        path = self.channel_dir(channel)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def scope_path(self, channel: str, month: str) -> Path:
        return self.channel_dir(channel) / f"{month}.txt"

    def load(self, path) -> list[Video]:
        path = Path(path)
        channel = path.parent.name
        try:
            # newline="" keeps \r inside titles; records are split on \n only
            with open(path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except FileNotFoundError:
            return []

        videos = []
        for line in text.split("\n"):
            if not line:
                continue
            fields = line.split("|", 2)
            if len(fields) != 3:
                continue
            published, video_id, title = fields
            videos.append(Video(id=video_id, title=title, published=published, channel_id=channel))
        return videos

    def save(self, path, videos: list[Video]):
        path = Path(path)
        lines = [
            "|".join([v.published, v.id, escape_title(v.title)])
            for v in sort_videos(videos)
        ]
        data = "\n".join(lines)

        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(data)
            os.chmod(tmp, 0o644)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
