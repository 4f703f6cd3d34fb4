"""File loggers for agent components."""

import logging
import os


def build_logger(log_dir: str, name: str, filename: str) -> logging.Logger:
    """Return a logger writing to ``log_dir/filename``; reuses existing handlers."""
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.abspath(os.path.join(log_dir, filename))
    logger = logging.getLogger(f"{name}.{log_path}")
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
