import os
import sys

from loguru import logger


def setup_logger(*, level: str | None = None, log_file: str = "", json_logs: bool = False) -> None:
    """Configure loguru for the CLI.

    Console level is the level argument, else LOG_LEVEL env (default: WARNING).
    Logs go to stderr so that stdout carries only the command's report.
    An optional file sink captures DEBUG for post-mortem analysis.
    """
    console_level = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    logger.remove()

    if json_logs:
        logger.add(sys.stderr, serialize=True, level=console_level)
    else:
        logger.add(
            sys.stderr,
            format=(
                "<green>{time:HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
                "<level>{message}</level>"
            ),
            level=console_level,
            colorize=True,
        )

    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",
            retention="3 days",
            compression="gz",
            level="DEBUG",
            serialize=json_logs,
        )
