import datetime as dt
import os
import threading
import time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter

LOCALTIME_PATH = "/etc/localtime"


def local_zone():
    """The process's local zone with its DST rules: $TZ, then /etc/localtime, then the current fixed offset."""
    name = os.environ.get("TZ", "").lstrip(":")
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            pass
    try:
        with open(LOCALTIME_PATH, "rb") as f:
            return ZoneInfo.from_file(f, key="localtime")
    except (OSError, ValueError):
        return dt.datetime.now().astimezone().tzinfo


def resolve_timezone(name: str, logger=None):
    """Returns the named zone; "Local", empty and unknown names give the local zone."""
    name = str(name or "").strip()
    if not name or name == "Local":
        return local_zone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        if logger:
            logger.warning(f"无效的时区 {name}，改用本地时区: {e}")
        return local_zone()


class CronScheduler:
    def __init__(self, spec: str, job, logger, tz: str = "Local"):
        if not croniter.is_valid(spec):
            raise ValueError(f"invalid cron spec: {spec!r}")
        self.spec = spec
        self.tz_name = str(tz or "Local")
        self.job = job
        self.logger = logger
        self.tz = resolve_timezone(tz, logger)
        self._running = threading.Lock()
        self.worker = None

    def now(self) -> dt.datetime:
        return dt.datetime.now(self.tz)

    def next_fire(self, after: dt.datetime = None) -> dt.datetime:
        base = (after or self.now()).astimezone(self.tz)
        return croniter(self.spec, base).get_next(dt.datetime)

    def is_running(self) -> bool:
        return self._running.locked()

    def fire(self) -> bool:
        # single slot: a trigger that lands while the last run is alive is dropped, not queued
        if not self._running.acquire(blocking=False):
            self.logger.info("skip: previous run still in progress")
            return False
        self.worker = threading.Thread(target=self._run_job, name="tubewatch-sweep", daemon=True)
        self.worker.start()
        return True

    def _run_job(self):
        try:
            self.job()
        except Exception as e:
            self.logger.error(f"scheduled run failed: {e}")
        finally:
            self._running.release()

    def run(self):
        self.logger.info(f"monitoring. spec='{self.spec}' tz={self.tz_name} ({self.tz})")
        while True:
            now = self.now()
            time.sleep(self.seconds_until(self.next_fire(now), now))
            self.fire()

    @staticmethod
    def seconds_until(target: dt.datetime, now: dt.datetime) -> float:
        # same-tzinfo subtraction is wall-clock; compare instants instead
        delta = target.astimezone(dt.timezone.utc) - now.astimezone(dt.timezone.utc)
        return max(0.0, delta.total_seconds())
