"""
Logging setup for the viewer and the bundled server

The TUI owns the terminal, so its records go to a file under the log
directory. The server also logs to the console through rich.
"""
import logging
from pathlib import Path

from rich.logging import RichHandler

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "cwlv.log"


def configure_logging(log_dir: Path, level: str = "INFO", console: bool = False) -> Path:
    """
    Attach the CWLV handlers to the package logger

    Args:
        log_dir: Directory for the log file (created if missing)
        level: Logging level name
        console: Also log to the terminal (server mode)

    Returns:
        Path of the log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    logger = logging.getLogger("CWLV")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Configure handlers only once
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    if console and not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(rich_tracebacks=True))

    logger.info(f"Logging configured at {level.upper()} level")
    return log_file
