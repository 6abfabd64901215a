import logging
from typing import Optional

from tracker.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach one stream handler to the package logger.

    Streamlit reruns the script on every interaction, so the handler is only
    added the first time.
    """
    root = logging.getLogger("tracker")
    root.setLevel(level or settings.LOG_LEVEL)
    if not any(getattr(h, "_tracker_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._tracker_handler = True
        root.addHandler(handler)
    return root
