"""PDF text extraction — thin wrapper around pypdf and docling.

``pypdf`` (the default) returns the plain page text; ``docling`` returns a
markdown export; ``auto`` tries docling first and falls back to pypdf.
Nothing is cached: every run re-extracts.
"""

import logging
from pathlib import Path

from docling.document_converter import DocumentConverter
from pypdf import PdfReader

from pdfdigest.models import ParseError

logger = logging.getLogger(__name__)


def extract_text(pdf_path: Path, extractor: str = "pypdf") -> str:
    """Extract the full text of ``pdf_path``.

    Args:
        pdf_path:  Path to the PDF file.
        extractor: ``pypdf``, ``docling`` or ``auto``.

    Returns:
        The document text.  May be empty or whitespace-only for scanned PDFs;
        the caller decides whether that is fatal.

    Raises:
        ParseError: if the selected backend fails.
    """
    logger.info("Running %s extraction on: %s", extractor, pdf_path.name)
    if extractor == "docling":
        text = _run_docling(pdf_path)
    elif extractor == "pypdf":
        text = _run_pypdf(pdf_path)
    elif extractor == "auto":
        text = _run_docling_with_fallback(pdf_path)
    else:
        raise ParseError(f"Unknown extractor {extractor!r}")
    logger.info("Extraction complete: %s chars", f"{len(text):,}")
    return text


def _run_docling_with_fallback(pdf_path: Path) -> str:
    """Run docling, then fall back to pypdf text extraction on failure."""
    try:
        return _run_docling(pdf_path)
    except ParseError as docling_exc:
        logger.warning(
            "Docling parse failed for %s; attempting pypdf fallback: %s",
            pdf_path.name,
            docling_exc,
        )
        try:
            return _run_pypdf(pdf_path)
        except ParseError as fallback_exc:
            root_cause = docling_exc.__cause__ or docling_exc
            raise ParseError(
                f"Failed to parse {pdf_path}: docling and pypdf fallback failed ({fallback_exc})"
            ) from root_cause


def _run_docling(pdf_path: Path) -> str:
    """Run docling on *pdf_path* and return the full markdown string.

    Raises:
        ParseError: wrapping any exception raised by docling.
    """
    try:
        converter = DocumentConverter()
        result = converter.convert(str(pdf_path))
        return result.document.export_to_markdown()
    except Exception as e:
        raise ParseError(f"Failed to parse {pdf_path}: {e}") from e


def _run_pypdf(pdf_path: Path) -> str:
    """Join the stripped text of every non-blank page, one page per line."""
    try:
        reader = PdfReader(str(pdf_path))
        pages: list[str] = []
        for page in reader.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                pages.append(page_text)
        return "\n".join(pages)
    except Exception as e:
        raise ParseError(f"Failed to parse {pdf_path}: pypdf error: {e}") from e
