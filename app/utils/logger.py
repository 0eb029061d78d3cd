import logging

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    level_name = (level or get_settings().log_level).upper()

    root = logging.getLogger("app")
    root.setLevel(getattr(logging, level_name, logging.INFO))

    # avoid duplicate handlers on reload
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    return root


logger = setup_logging()
