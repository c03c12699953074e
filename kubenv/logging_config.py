# kubenv/logging_config.py
import logging
import sys


def setup_logging(level="WARNING"):
    """Configure logging for the CLI. Log records go to stderr only."""
    logger = logging.getLogger("kubenv")
    logger.setLevel(level)

    # Remove old handlers to avoid duplicate lines on repeated setup
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.debug("Logging configured at level %s", logging.getLevelName(logger.level))
    return logger
