import logging
import sys

FORMAT = "[%(levelname)s] %(asctime)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO"):
    """Install a single stdout handler on the ``stockroom`` logger tree."""
    log = logging.getLogger("stockroom")
    log.setLevel(level.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(FORMAT))
        log.addHandler(h)
    return log
