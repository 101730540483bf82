"""Render a ``DigestResult`` to its output string and optionally save it.

Structured results become pretty-printed JSON with all five schema keys;
everything else (plain mode, degraded structured mode) is the trimmed text.
"""

import json
import logging
from pathlib import Path

from pdfdigest.models import DigestResult

logger = logging.getLogger(__name__)


def render_result(result: DigestResult) -> str:
    """Return the text to print for ``result``."""
    if result.structured is not None:
        return json.dumps(result.structured.model_dump(), indent=2, ensure_ascii=False)
    return result.text


def write_output(content: str, output_path: Path) -> bool:
    """Write ``content`` to ``output_path``, creating parent directories.

    A failure is logged as a warning and reported through the return value;
    the summary has already been printed, so the run is not aborted.
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write output to %s: %s", output_path, exc)
        return False
    logger.info("Written: %s", output_path)
    return True
