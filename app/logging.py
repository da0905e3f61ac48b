"""
Logging configuration.
App loggers live under "storefront" (storefront.auth, storefront.push, ...).
"""
import logging
import sys

# Chatty per-request loggers of the push HTTP stack
_QUIET_LOGGERS = ("urllib3", "pywebpush")


def setup_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> None:
    if isinstance(level, str):
        level = level.upper()
    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    logging.basicConfig(
        level=level,
        format=format_string,
        stream=sys.stdout,
        force=True,
    )
    # Uvicorn loggers: keep access and error levels consistent
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    logging.getLogger("storefront").setLevel(level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
