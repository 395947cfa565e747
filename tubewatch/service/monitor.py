from dataclasses import dataclass, field

from tubewatch.dedup import ByIdentifier, DedupPolicy


@dataclass
class SweepResult:
    new_videos: list = field(default_factory=list)
    failed_channels: list = field(default_factory=list)


class MonitorService:
    def __init__(self, client, repository, logger, policy: DedupPolicy = None):
        self.client = client
        self.repository = repository
        self.logger = logger
        self.policy = policy or ByIdentifier()

    def collect_channel(self, channel: str) -> list:
        collected = []
        for video in self.client.get_channel_videos(channel):
            if self.repository.has_video(self.policy.key(video)):
                continue
            self.repository.add_video(video)
            collected.append(video)
        return collected

    def collect(self, channels) -> SweepResult:
        result = SweepResult()
        for channel in channels:
            try:
                videos = self.collect_channel(channel)
            except Exception as e:
                self.logger.error(f"Failed to collect videos for channel [{channel}]: {e}")
                result.failed_channels.append(channel)
                continue
            for v in videos:
                self.logger.info(f"发现新视频: {v.title} (ID: {v.id}, 频道: {channel})")
            result.new_videos.extend(videos)
        return result
