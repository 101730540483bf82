"""Logging setup for the pdfdigest CLI.

Call ``setup_logging`` once from ``cli.main()`` to configure the ``"pdfdigest"``
package logger.  All other modules obtain a child logger via
``logging.getLogger(__name__)``.  Everything goes to stderr so that stdout
carries only the summary.
"""

import logging
import sys
from pathlib import Path

_FMT = "%(asctime)s  %(levelname)-7s %(name)s: %(message)s"
_DATE = "%H:%M:%S"


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """Configure the ``pdfdigest`` logger for a CLI session.

    Args:
        verbose:  If True, set level to DEBUG (per-request timing and prompt
                  sizes).  Default level is INFO.
        log_file: If provided, also write records to this file.  Parent
                  directories are created automatically.

    Safe to call more than once: existing handlers are replaced.
    """
    logger = logging.getLogger("pdfdigest")
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
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
