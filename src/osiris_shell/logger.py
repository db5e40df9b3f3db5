import logging
import os

from osiris_shell.runtime_config import OSIRIS_LOG_LEVEL_ENV, get_data_dir

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    """Send all osiris_shell logs to <data dir>/osiris.log.

    The terminal surface is owned by the session engine, so nothing is logged to stdout.
    """
    level_name = os.environ.get(OSIRIS_LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    log_dir = get_data_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "osiris.log"

    logger = logging.getLogger("osiris_shell")
    logger.setLevel(level)
    logger.propagate = False

    # Calling setup_logging twice must not duplicate lines
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
