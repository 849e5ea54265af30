import logging
import sys
from cookwho.settings.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False

def _configure_root():
    global _configured
    if _configured:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("cookwho")
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())
    _configured = True

def get_logger(name: str) -> logging.Logger:
    """
    Returns a named logger under the "cookwho" hierarchy.
    """
    _configure_root()
    return logging.getLogger(f"cookwho.{name}")
