"""
Logging configuration for the Cortex panel.
"""

import logging
import logging.config
from typing import Union


def setup_logging(default_level: Union[int, str] = logging.INFO) -> None:
    """Configure logging for the entire package.

    Sets up a root logger using ``logging.config`` dictionary configuration so
    every module logging through ``logging.getLogger(__name__)`` shares one
    console handler and format.

    Example:
        ```python
        from cortex_panel.core.logging import setup_logging

        setup_logging("DEBUG")
        logger = logging.getLogger(__name__)
        logger.info("Logging initialized successfully.")
        ```

    Args:
        default_level: Root log level, as a ``logging`` constant or a level
            name such as ``"INFO"``.
    """
    if isinstance(default_level, str):
        default_level = logging.getLevelName(default_level.strip().upper())
        if not isinstance(default_level, int):
            default_level = logging.INFO

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "panel": {"format": "[%(asctime)s] - [%(levelname)s] - %(name)s: %(message)s"},
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "panel",
                "level": default_level,
            },
        },
        # markdown-it (used by rich Markdown) is chatty at DEBUG
        "loggers": {"markdown_it": {"level": "WARNING"}},
        "root": {"handlers": ["stderr"], "level": default_level},
    }

    logging.config.dictConfig(config)
