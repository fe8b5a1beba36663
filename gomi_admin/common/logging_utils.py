"""
Shared logging setup for the CLI and the API.
"""

import logging

import config

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(level_name: str | None = None) -> None:
    """
    Configure the root logger once, from level_name or config.LOG_LEVEL.
    Later calls only adjust the level.
    """
    level_name = str(level_name or config.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
        return
    logging.basicConfig(level=level, format=LOG_FORMAT)
