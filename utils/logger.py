# utils/logger.py - shared logger setup for the client and its runners
import logging

from utils.config import load_log_level


def get_logger(name: str = "api-client"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(load_log_level())
        # own handler above; don't print twice through root
        logger.propagate = False
    return logger


def redact_headers(headers):
    """Copy of ``headers`` safe for logs (Authorization credentials hidden)."""
    safe = dict(headers)
    for key in list(safe):
        if key.lower() == "authorization":
            scheme, sep, _ = str(safe[key]).partition(" ")
            safe[key] = f"{scheme} [REDACTED]" if sep else "[REDACTED]"
    return safe
