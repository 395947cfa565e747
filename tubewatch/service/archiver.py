from dataclasses import dataclass, field

from tubewatch.archive_store import MonthlyArchiveStore
from tubewatch.dedup import ByEscapedTitle, DedupPolicy
from tubewatch.models import ChannelStats, Video, published_month


@dataclass
class ScopeResult:
    videos: list
    archived: list = field(default_factory=list)
    skipped: int = 0


def reconcile(existing: list[Video], candidates: list[Video], policy: DedupPolicy = None) -> ScopeResult:
    policy = policy or ByEscapedTitle()
    videos = list(existing)
    keys = {policy.key(v) for v in videos}
    result = ScopeResult(videos=videos)

    for video in candidates:
        if policy.seen(keys, video):
            result.skipped += 1
            continue
        keys.add(policy.key(video))
        videos.append(video)
        result.archived.append(video)
    return result


def group_by_month(videos: list[Video], stats: ChannelStats, logger) -> dict:
    groups = {}
    for video in videos:
        try:
            month = published_month(video)
        except ValueError as e:
            stats.failed += 1
            logger.error(f"Failed to parse video published [{video.published}] ({video.id}): {e}")
            continue
        groups.setdefault(month, []).append(video)
    return groups


class ArchiverService:
    def __init__(self, store: MonthlyArchiveStore, logger, policy: DedupPolicy = None):
        self.store = store
        self.logger = logger
        self.policy = policy or ByEscapedTitle()

    def archive_channel(self, channel: str, videos: list[Video], stats: ChannelStats = None) -> ChannelStats:
        stats = stats or ChannelStats(channel=channel)
        stats.fetched += len(videos)

        for month, candidates in group_by_month(videos, stats, self.logger).items():
            path = self.store.scope_path(channel, month)
            try:
                existing = self.store.load(path)
            except OSError as e:
                stats.failed += len(candidates)
                self.logger.error(f"Failed to load videos from file [{path}]: {e}")
                continue

            result = reconcile(existing, candidates, self.policy)
            if result.archived:
                try:
                    self.store.save(path, result.videos)
                except OSError as e:
                    stats.failed += len(candidates)
                    self.logger.error(f"Failed to save videos to file [{path}]: {e}")
                    continue
                for v in result.archived:
                    self.logger.info(f"已归档: {v.title} (ID: {v.id}) -> {path}")

            stats.skipped += result.skipped
            stats.archived += len(result.archived)
        return stats
