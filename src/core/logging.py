import logging

from .config import settings
from .config_models import LoggingConfig


def _level(name: str | None) -> int:
    return getattr(logging, (name or "INFO").upper(), logging.INFO)


def setup_logging(config: LoggingConfig | None = None, *, sql_echo: bool | None = None) -> None:
    """
    Configure root logging for the posts board.

    - Root level and format come from ``settings.logging`` unless ``config`` is given
    - Loggers listed in ``quiet_loggers`` never log below WARNING
    - ``sqlalchemy.engine`` logs statements only when the database echo flag is on
    - Calling it again only updates levels (idempotent)
    """
    config = config or settings.logging
    if sql_echo is None:
        sql_echo = settings.database is not None and settings.database.echo
    level = _level(config.level)

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=config.format)

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)


__all__ = ["setup_logging"]
