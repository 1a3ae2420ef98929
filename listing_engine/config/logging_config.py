# listing_engine/config/logging_config.py

"""Logging for listing_engine: one file per run, warnings on stderr.

Run files are named ``run_<YYYYmmdd_HHMMSS>.log`` and only the newest
``Settings.LOG_RETENTION`` of them are kept.  The stderr threshold comes
from ``Settings.LOG_CONSOLE_LEVEL`` unless the caller overrides it (the
CLI does for ``--verbose``).
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from listing_engine.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("listing_engine")


def _prune_run_logs(directory: Path, keep: int, current: Path) -> int:
    """Delete the oldest run files so that *keep* remain with *current*."""
    older = sorted(p for p in directory.glob("run_*.log") if p != current)
    excess = len(older) - max(0, keep - 1)
    for path in older[:max(0, excess)]:
        path.unlink(missing_ok=True)
    return max(0, excess)


def setup_logging(
    logs_dir: Path | None = None,
    console_level: str | int | None = None,
) -> Path:
    """Attach the run-file and stderr handlers to ``listing_engine``.

    Calling it again leaves the existing handlers alone and returns the
    would-be path for this run.
    """
    directory = logs_dir or Settings.LOGS_DIR
    directory.mkdir(parents=True, exist_ok=True)
    log_file = directory / datetime.now().strftime("run_%Y%m%d_%H%M%S.log")

    logger.setLevel(logging.DEBUG)
    if logger.handlers:
        return log_file

    pruned = _prune_run_logs(directory, Settings.LOG_RETENTION, log_file)

    to_file = logging.FileHandler(log_file, encoding="utf-8")
    to_file.setLevel(logging.DEBUG)
    to_file.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))
    logger.addHandler(to_file)

    level = console_level or Settings.LOG_CONSOLE_LEVEL
    to_stderr = logging.StreamHandler(sys.stderr)
    to_stderr.setLevel(level.upper() if isinstance(level, str) else level)
    to_stderr.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(to_stderr)

    logger.debug(
        "Logging to %s (%d old run logs pruned)", log_file, pruned
    )
    return log_file
