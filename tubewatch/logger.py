import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s"


def setup_logger(log_dir: Optional[str], name: str = "tubewatch", level: str = "INFO") -> logging.Logger:
    """Named logger writing to stderr and, when log_dir is set, to <log_dir>/<name>.log.

    Calling it again for the same name returns the already configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = False

    if logger.handlers:
        return logger

    fmt = logging.Formatter(LOG_FORMAT)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(Path(log_dir) / f"{name.replace('.', '-')}.log", encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    return logger
