#archive: 拉取各频道 feed，按月归档到 <destination>/<channel>/<YYYY-MM>.txt
#monitor: 按 cron 定时轮询，新视频写入数据库并触发通知
import argparse
import sys

from tubewatch.app import MonitorApp, run_archiver
from tubewatch.config.config import ConfigError, load_archive_config, load_monitor_config
from tubewatch.logger import setup_logger


def archive(argv):
    parser = argparse.ArgumentParser(prog="tubewatch archive")
    parser.add_argument("--config", default=None, help="config file (YAML or JSON)")
    args = parser.parse_args(argv)

    try:
        config = load_archive_config(args.config)
    except ConfigError as e:
        setup_logger(None, "tubewatch.archiver").error(str(e))
        return 1

    logger = setup_logger(config.log_dir, "tubewatch.archiver")
    try:
        run_archiver(config, logger)
    except OSError as e:
        logger.error(f"Failed to create destination directory [{config.destination}]: {e}")
        return 1
    return 0


def monitor(argv):
    config = load_monitor_config(argv)
    logger = setup_logger(config.log_dir, "tubewatch.monitor")
    try:
        MonitorApp(config, logger).run()
    except KeyboardInterrupt:
        logger.info("stopped.")
    except Exception as e:
        logger.error(f"run, err='{e}'")
        return 1
    return 0


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    commands = {"archive": archive, "monitor": monitor}
    if not argv or argv[0] not in commands:
        print(f"usage: tubewatch {{{','.join(commands)}}} [options]", file=sys.stderr)
        return 2
    return commands[argv[0]](argv[1:])


if __name__ == "__main__":
    sys.exit(main())
