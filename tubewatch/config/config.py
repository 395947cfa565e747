import argparse
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

DEFAULT_ARCHIVE_CONFIG = Path(__file__).parent / "config.yaml"
DEFAULT_DESTINATION = "data"

ENV_PREFIX = "YOUTUBE_COLLECTOR_"


class ConfigError(RuntimeError):
    pass


@dataclass
class ArchiveConfig:
    channels: list
    destination: str = DEFAULT_DESTINATION
    proxy: Optional[str] = None
    log_dir: str = "logs"


@dataclass
class MonitorConfig:
    proxy: Optional[str] = None
    channels: list = field(default_factory=list)
    driver: str = "sqlite3"
    dsn: str = "data/youtube.db"
    spec: str = "* 18 * * *"
    tz: str = "Local"
    log_dir: str = "logs"


def _parse_channels(raw) -> list:
    channels = []
    for c in raw or []:
        if isinstance(c, dict):
            if not c.get("enabled", True):
                continue
            c = c.get("id") or c.get("channel_id")
        text = str(c or "").strip()
        if text:
            channels.append(text)
    return channels


def load_archive_config(path=None) -> ArchiveConfig:
    path = Path(path or DEFAULT_ARCHIVE_CONFIG)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to load config [{path}]: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config [{path}]: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config [{path}] must be a mapping")

    # also accept capitalised keys ({"Channels": [...], "Destination": ...})
    def get(key, default=None):
        value = raw.get(key, raw.get(key.capitalize()))
        return default if value is None else value

    return ArchiveConfig(
        channels=_parse_channels(get("channels", [])),
        destination=str(get("destination") or DEFAULT_DESTINATION),
        proxy=get("proxy") or None,
        log_dir=str(get("log_dir", "logs")),
    )


def _split_env_list(value: Optional[str]) -> list:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def load_monitor_config(argv=None, environ=None) -> MonitorConfig:
    if environ is None:
        load_dotenv()
        environ = os.environ
    defaults = MonitorConfig()

    def env(name, default):
        return environ.get(ENV_PREFIX + name) or default

    parser = argparse.ArgumentParser(prog="tubewatch monitor", description="youtube collector and monitor")
    parser.add_argument("--proxy", default=env("PROXY", None), help="proxy")
    parser.add_argument("--channel", action="append", default=None, help="channel (repeatable)")
    parser.add_argument("--dn", default=env("DN", defaults.driver), help="database driver name (sqlite3 | mysql)")
    parser.add_argument("--dsn", default=env("DSN", defaults.dsn), help="database source name")
    parser.add_argument("--spec", default=env("SPEC", defaults.spec), help="cron spec")
    parser.add_argument("--tz", default=env("TZ", defaults.tz), help="time zone")
    parser.add_argument("--log-dir", default=env("LOG_DIR", defaults.log_dir), help="log directory")
    args = parser.parse_args(argv)

    channels = args.channel if args.channel else _split_env_list(environ.get(ENV_PREFIX + "CHANNEL"))

    return MonitorConfig(
        proxy=args.proxy or None,
        channels=_parse_channels(channels),
        driver=args.dn,
        dsn=args.dsn,
        spec=args.spec,
        tz=args.tz,
        log_dir=args.log_dir,
    )
