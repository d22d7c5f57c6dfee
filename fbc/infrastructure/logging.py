import logging
from pathlib import Path
from typing import Optional

def setup_logging(log_path: Optional[Path] = None, debug: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Setup logging configuration for FBC.

    Writes to log_path when one is given. Without a log file (or in quiet mode)
    only a NullHandler is installed so library records never reach the terminal;
    console output is the reporter's job.

    Args:
        log_path: Optional path to log file; parent directories are created
        debug: If True, enable DEBUG level logging with per-job timings
        quiet: If True, mute the log file as well
    """
    level = logging.DEBUG if debug else logging.INFO

    if log_path and not quiet:
        log_file = Path(log_path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file)]
    else:
        log_file = None
        handlers = [logging.NullHandler()]

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True  # Override any existing configuration
    )

    logger = logging.getLogger(__name__)
    if log_file is not None:
        logger.info(f"Logging initialized: {log_file} (debug={'ON' if debug else 'OFF'})")

    return logger
