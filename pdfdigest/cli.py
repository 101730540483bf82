"""Command-line interface for pdfdigest.

Entry point: ``pdfdigest`` (configured in ``pyproject.toml``).

Usage:
    pdfdigest FILE [MODEL] [API_URL] [options]

Key options:
    --structured/-s, --lang/-l, --output/-o, --max-chars, --timeout,
    --extractor, --verbose/--no-verbose, --log-file.

``MODEL`` and ``API_URL`` default to the ``LLM_MODEL`` and ``LLM_API_URL``
environment variables (a ``.env`` file is honoured).  The summary is printed
to stdout; progress and errors go to stderr.

Exit codes: 0 success, 1 file not found, 2 no text extracted, 3 PDF
extraction error, 4 a chunk request failed, 5 the final request failed,
64 invalid command-line usage.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from pdfdigest.log import setup_logging
from pdfdigest.models import (
    Config,
    ExitCode,
    PipelineError,
    _DEFAULT_API_URL,
    _DEFAULT_MAX_CHARS,
    _DEFAULT_MODEL,
    _DEFAULT_TIMEOUT_S,
)
from pdfdigest.pipeline import digest_pdf
from pdfdigest.renderer import render_result, write_output

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    parsed = int(value)
    if parsed < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return parsed


class _ArgumentParser(argparse.ArgumentParser):
    """Exits with ``ExitCode.USAGE`` on bad arguments instead of argparse's 2,
    which ``ExitCode.NO_TEXT`` already uses."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(ExitCode.USAGE, f"{self.prog}: error: {message}\n")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Parse CLI arguments, run the pipeline and print the summary."""
    load_dotenv()

    parser = _build_parser()
    args = parser.parse_args()

    setup_logging(
        verbose=args.verbose,
        log_file=Path(args.log_file) if args.log_file else None,
    )

    config = Config(
        api_url=args.api_url,
        model=args.model,
        max_chars=args.max_chars,
        timeout_s=args.timeout,
        structured=args.structured,
        language=args.lang,
        output_path=Path(args.output) if args.output else None,
        extractor=args.extractor,
        verbose=args.verbose,
    )

    pdf_path = Path(args.file)
    if not pdf_path.is_file():
        logger.error("File not found: %s", pdf_path)
        sys.exit(ExitCode.FILE_NOT_FOUND)

    logger.info("Processing: %s  model=%s", pdf_path.name, config.model)
    try:
        result = digest_pdf(pdf_path, config)
    except PipelineError as exc:
        logger.error("%s", exc)
        sys.exit(exc.exit_code)

    output = render_result(result)
    print(output)

    if config.output_path is not None:
        write_output(output, config.output_path)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="pdfdigest",
        description=(
            "Summarise a PDF with a local LLM: the text is split into chunks, "
            "each chunk is summarised, and the partial summaries are combined."
        ),
    )

    parser.add_argument("file", metavar="FILE", help="Path to the PDF to summarise.")

    _default_model = os.environ.get("LLM_MODEL", _DEFAULT_MODEL)
    parser.add_argument(
        "model",
        metavar="MODEL",
        nargs="?",
        default=_default_model,
        help=f"Model name (default: LLM_MODEL env var, currently {_default_model!r}).",
    )
    _default_api_url = os.environ.get("LLM_API_URL", _DEFAULT_API_URL)
    parser.add_argument(
        "api_url",
        metavar="API_URL",
        nargs="?",
        default=_default_api_url,
        help=f"Generate endpoint URL (default: LLM_API_URL env var, currently {_default_api_url!r}).",
    )

    parser.add_argument(
        "--structured",
        "-s",
        action="store_true",
        default=False,
        help="Request a JSON summary (title, summary, key_points, language, word_count).",
    )
    parser.add_argument(
        "--lang",
        "-l",
        metavar="CODE",
        default="en",
        help="Language code of the summary (default: en).",
    )
    parser.add_argument(
        "--output",
        "-o",
        metavar="PATH",
        default=None,
        help="Also write the summary to PATH.",
    )
    parser.add_argument(
        "--max-chars",
        metavar="N",
        type=_positive_int,
        default=_DEFAULT_MAX_CHARS,
        help=f"Maximum characters per chunk sent to the LLM (default: {_DEFAULT_MAX_CHARS:,}).",
    )
    parser.add_argument(
        "--timeout",
        metavar="S",
        type=_positive_int,
        default=_DEFAULT_TIMEOUT_S,
        help=f"Per-request timeout in seconds (default: {_DEFAULT_TIMEOUT_S}).",
    )
    parser.add_argument(
        "--extractor",
        choices=["pypdf", "docling", "auto"],
        default="pypdf",
        help="PDF text extraction backend (default: pypdf; auto = docling with pypdf fallback).",
    )
    parser.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Enable DEBUG-level logging (per-request timings).",
    )
    parser.add_argument(
        "--log-file",
        metavar="FILE",
        default=None,
        help="Also write log output to FILE.",
    )

    return parser


if __name__ == "__main__":
    main()
