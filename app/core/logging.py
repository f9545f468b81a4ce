# app/core/logging.py
import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the whole service."""
    root = logging.getLogger()

    if not any(getattr(h, "_formgen", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handler._formgen = True
        root.addHandler(handler)

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # The HTTP clients are chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
