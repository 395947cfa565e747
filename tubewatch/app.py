from pathlib import Path

from tubewatch.archive_store import MonthlyArchiveStore
from tubewatch.infra.youtube_feed import FeedError, YouTubeFeedClient
from tubewatch.models import ChannelStats
from tubewatch.scheduler import CronScheduler
from tubewatch.service.archiver import ArchiverService
from tubewatch.service.monitor import MonitorService
from tubewatch.service.notifier import Notifier
from tubewatch.state import VideoRepository


def run_archiver(config, logger, client=None, store=None) -> list:
    # destination root failing is fatal; everything after is per channel
    Path(config.destination).mkdir(parents=True, exist_ok=True)

    client = client or YouTubeFeedClient(proxy=config.proxy)
    store = store or MonthlyArchiveStore(config.destination)
    archiver = ArchiverService(store, logger)

    stats = []
    for channel in config.channels:
        stat = ChannelStats(channel=channel)
        stats.append(stat)

        try:
            store.ensure_channel_dir(channel)
        except OSError as e:
            stat.error = str(e)
            logger.error(f"Failed to create channel [{channel}] directory [{store.channel_dir(channel)}]: {e}")
            continue

        try:
            videos = client.get_channel_videos(channel)
        except FeedError as e:
            stat.error = str(e)
            logger.error(f"Failed to get videos for channel [{channel}]: {e}")
            continue

        archiver.archive_channel(channel, videos, stat)

    for stat in stats:
        logger.info(stat.summary())
    return stats


class MonitorApp:
    def __init__(self, config, logger, client=None, repository=None, notifier=None):
        self.config = config
        self.logger = logger
        self.client = client or YouTubeFeedClient(proxy=config.proxy)
        self.repository = repository or VideoRepository(config.driver, config.dsn)
        self.notifier = notifier or Notifier(logger)
        self.monitor = MonitorService(self.client, self.repository, logger)

    def sweep(self):
        try:
            result = self.monitor.collect(self.config.channels)
        except Exception as e:
            self.logger.error(f"monitoring, err='{e}'")
            return []

        if result.failed_channels:
            self.logger.warning(f"monitoring, failed channels: {', '.join(result.failed_channels)}")
        if result.new_videos:
            self.logger.info(f"monitoring found {len(result.new_videos)} new youtube video(s).")
            self.notifier.notify(result.new_videos)
        else:
            self.logger.info("monitoring, no new video.")
        return result.new_videos

    def run(self):
        self.repository.migrate()
        scheduler = CronScheduler(self.config.spec, self.sweep, self.logger, tz=self.config.tz)
        try:
            scheduler.run()
        finally:
            self.repository.close()
