"""Logging setup for the clockidup command line."""
import logging
import sys


def setup_logging(debug: bool = False):
    """Send clockidup logs to stderr as "[LEVEL] message".

    stdout is kept for the standup itself.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        handlers=[handler],
        force=True,
    )
    # urllib3 is too chatty at debug level, the adapter traces requests already.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
