"""
Logging setup.

Console output always; error.log and combined.log files when enabled.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_dir: Optional[str] = None,
    to_file: bool = True,
) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        level: Root log level name
        log_dir: Directory for error.log and combined.log
        to_file: Whether to install the file handlers
    """
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    handlers.append(console)

    if to_file and log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        error_handler = logging.FileHandler(path / "error.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        handlers.append(error_handler)

        combined_handler = logging.FileHandler(path / "combined.log", encoding="utf-8")
        combined_handler.setFormatter(formatter)
        handlers.append(combined_handler)

    logging.basicConfig(level=level.upper(), handlers=handlers, force=True)
