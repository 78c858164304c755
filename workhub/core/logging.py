# workhub/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
HANDLER_NAME = "workhub"


def configure_logging(level: str = "INFO") -> None:
    """Installs one stream handler on the root logger. Safe to call twice."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(h.get_name() == HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
