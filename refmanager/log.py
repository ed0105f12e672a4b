"""Logging setup for the refmanager CLI.

Call ``setup_logging`` once from ``cli.main()`` to configure the ``"refmanager"``
package logger with timestamps and optional file output.  All other modules
obtain a child logger via ``logging.getLogger(__name__)`` and let records
propagate here.
"""

import logging
import sys
from pathlib import Path

_FMT = "%(asctime)s  %(levelname)-7s %(message)s"
_DATE = "%H:%M:%S"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure the ``refmanager`` logger for a CLI session.

    Args:
        verbose:  If True, set level to DEBUG (shows request URLs, chunk
                  sizes and skipped articles) and send urllib3's connection
                  log to the same handlers.  Otherwise the level is INFO and
                  urllib3 is held at WARNING.
        log_file: If provided, attach a ``FileHandler`` that writes to this
                  path in addition to stderr.  Parent directories are created
                  automatically.

    Calling this function a second time (e.g., in tests) is safe: existing
    handlers are cleared before new ones are added.
    """
    logger = logging.getLogger("refmanager")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    fmt = logging.Formatter(_FMT, datefmt=_DATE)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    # E-utilities connection chatter from requests' transport
    http = logging.getLogger("urllib3")
    http.handlers.clear()
    if verbose:
        http.setLevel(logging.DEBUG)
        for handler in logger.handlers:
            http.addHandler(handler)
        http.propagate = False
    else:
        http.setLevel(logging.WARNING)
        http.propagate = True
