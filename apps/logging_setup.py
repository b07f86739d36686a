from __future__ import annotations

from pathlib import Path
import logging
import sys

from apps.dashboard_config import LOGS_DIR


def configure_logging(name: str, log_name: str | None = None, logs_dir: Path = LOGS_DIR) -> logging.Logger:
    """Attach file + stdout handlers to ``name``; ``apps`` covers every dashboard module."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    if logger.handlers:
        return logger

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    file_handler = logging.FileHandler(logs_dir / f"{log_name or name}.log")
    file_handler.setFormatter(formatter)
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)
    return logger
