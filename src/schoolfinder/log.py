"""
Logging configuration for the school finder.

Every module logs through the named `schoolfinder` logger so CLI runs, API
requests and library use all write the same format to the same places.
Modules that are used without `load_settings()` (tests, notebooks) still log
through that name; they simply inherit whatever handlers the host installed.
"""

from __future__ import annotations

# The stdlib logger is the only logging layer the project uses.
import logging
# `Path` builds the log file location under the configured logs directory.
from pathlib import Path

# Single logger name shared by the geocoder, Overpass client, fallback and pipeline.
LOGGER_NAME = "schoolfinder"
# One rolling file per project root; every search appends to it.
LOG_FILENAME = "schoolfinder.log"
# Same line layout for terminal and file output.
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
# Second resolution is enough to order mirror attempts within one search.
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(log_dir: Path, level: str = "INFO") -> logging.Logger:
    # The logs directory may not exist yet on a fresh checkout.
    log_dir.mkdir(parents=True, exist_ok=True)
    # Search logs for every city end up in one file under `logs_dir`.
    log_path = log_dir / LOG_FILENAME
    # Config files may spell the level "info" or "INFO".
    level_name = level.upper()

    # Handlers go on the named logger; the root logger is left to the host app.
    logger = logging.getLogger(LOGGER_NAME)
    # The logger level gates records before any handler sees them.
    logger.setLevel(level_name)
    # Records stop here so uvicorn's root handlers do not print them a second time.
    logger.propagate = False

    # Repeated `load_settings()` calls (CLI then API, uvicorn --reload) attach handlers once.
    if not logger.handlers:
        # Shared formatter for both destinations.
        fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

        # Terminal output shows geocoding and mirror progress while a search runs.
        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        stream.setLevel(level_name)

        # File output keeps the history of failed mirrors and fallback runs.
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(fmt)
        file_handler.setLevel(level_name)

        # Both handlers hang off the `schoolfinder` logger only.
        logger.addHandler(stream)
        logger.addHandler(file_handler)

    # Callers log the settings bootstrap line through the returned logger.
    return logger
