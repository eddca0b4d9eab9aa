"""
Logging configuration for the article scraper.

Importing the package installs no handlers; the library only emits through
"article_scraper.*" loggers.  Entry points (run_scraper.py, or
ArticleScraper(log_level=...)) call setup_logger() to get console output.
"""

import logging
import sys
from typing import Optional


def setup_logger(
    name: str = "article_scraper",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up and return a logger instance.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Optional file path for logging

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Calling again only adjusts the level; handlers are installed once
    if logger.handlers:
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    logger.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_module_logger(module_name: str) -> logging.Logger:
    """
    Get a child logger for a specific module.

    Child loggers (e.g. "article_scraper.classifier") propagate to the package
    logger's handlers, so the stage name shows up in every line.

    Args:
        module_name: Name of the module (e.g., 'sanitizer', 'fetcher')

    Returns:
        Child logger instance
    """
    return logging.getLogger(f"article_scraper.{module_name}")
