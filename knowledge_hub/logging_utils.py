import logging

import colorlog

LOGGER_NAME = "knowledge_hub"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a colored console handler to the package logger, once."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_level_from_string(level))

    if any(getattr(handler, "_knowledge_hub", False) for handler in logger.handlers):
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(name)s%(reset)s %(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
    )
    handler._knowledge_hub = True
    logger.addHandler(handler)
    return logger


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
