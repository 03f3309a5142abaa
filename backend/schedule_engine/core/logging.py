from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int | None = None) -> None:
    """Attach a stream handler to the package logger.

    Host applications that already configure logging can skip this; the
    package only ever logs through ``logging.getLogger(__name__)``.
    """
    if level is None:
        from schedule_engine.core.config import get_settings

        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    package_logger = logging.getLogger("schedule_engine")
    package_logger.setLevel(level)
    if not any(getattr(handler, "_schedule_engine", False) for handler in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._schedule_engine = True
        package_logger.addHandler(handler)
