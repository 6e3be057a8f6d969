# src/config/logging_config.py

"""Logging setup shared by the CLI and the health check.

``setup_logging`` attaches two handlers to the ``price_aggregator``
logger: a per-run file under ``Settings.LOGS_DIR`` that records
everything down to DEBUG (including dropped items), and a stderr
handler limited to WARNING, where provider failures surface.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "price_aggregator"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(lineno)d | %(message)s"
)
_STDERR_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _run_log_path(logs_dir: Path) -> Path:
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return logs_dir / f"run_{stamp}.log"


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach file and stderr handlers; return the run's log path.

    Handlers are attached once per process.  Later calls only compute
    the path and leave the existing handlers alone.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = _run_log_path(target_dir)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    if root_logger.handlers:
        return log_file

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(logging.DEBUG)
    to_file.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))

    to_stderr = logging.StreamHandler(sys.stderr)
    to_stderr.setLevel(logging.WARNING)
    to_stderr.setFormatter(logging.Formatter(_STDERR_FORMAT))

    root_logger.addHandler(to_file)
    root_logger.addHandler(to_stderr)
    root_logger.debug("Run log opened at %s", log_file)
    return log_file
