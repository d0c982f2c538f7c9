import logging
from .config import Config

logger = logging.getLogger('twitter_rest')
logger.setLevel(getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO))


def enable_debug_output():
    """Make request/response logging visible even when the caller set up no logging."""
    if logger.getEffectiveLevel() > logging.INFO:
        logger.setLevel(logging.INFO)
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
