import logging
import sys

ROOT_LOGGER = "retail_analysis"


def resolve_level(level: str | int) -> int:
    """
    Numeric value of a level given by name ("warning") or number.
    Unknown names raise ValueError.
    """
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown logging level: {level!r}")
    return value


def setup_logger(name: str = ROOT_LOGGER, level: str | int = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger instance for the analysis run.
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)

    return logger


def set_log_level(level: str | int) -> None:
    """Apply one level to every logger of the package."""
    numeric = resolve_level(level)
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if isinstance(logger, logging.Logger) and (name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + ".")):
            logger.setLevel(numeric)
