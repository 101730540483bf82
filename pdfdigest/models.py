"""Pydantic models, dataclass Config, exit codes and exceptions for pdfdigest.

The structured-summary schema is the only model validated against LLM output;
``DigestResult`` is the in-memory outcome of one run handed to the renderer.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator

# ---------------------------------------------------------------------------
# Structured summary
# ---------------------------------------------------------------------------


class StructuredSummary(BaseModel):
    """Fixed-schema summary requested in structured mode.

    Every field is optional: a model that returns only ``title`` and
    ``summary`` still yields a valid (partial) result.  Keys are matched
    case-insensitively, so ``{"Title": ...}`` fills ``title``.
    Values are validated strictly: ``"10"`` or ``true`` for ``word_count``
    is a schema mismatch, not a coercion.
    """

    model_config = ConfigDict(extra="ignore", strict=True)

    title: str | None = None
    summary: str | None = None
    key_points: list[str] | None = None
    language: str | None = None
    word_count: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _lowercase_keys(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {str(k).lower(): v for k, v in data.items()}
        return data


class ExtractionState(str, Enum):
    """States of the structured-output extraction (see ``structured.py``)."""

    UNPARSED = "unparsed"
    PARSED = "parsed"
    RETRY_PENDING = "retry_pending"
    DEGRADED = "degraded"


class DigestResult(BaseModel):
    """Outcome of one run of the pipeline.

    ``structured`` is set only when structured mode was requested and the
    extraction reached ``PARSED``; otherwise callers print ``text``.
    """

    text: str
    structured: StructuredSummary | None = None
    chunk_count: int
    extraction_state: ExtractionState | None = None


# ---------------------------------------------------------------------------
# Config (dataclass — not pydantic; holds runtime settings)
# ---------------------------------------------------------------------------

_DEFAULT_API_URL = "http://localhost:11434/api/generate"
_DEFAULT_MODEL = "llama2"
_DEFAULT_MAX_CHARS = 3000
_DEFAULT_TIMEOUT_S = 30


@dataclass
class Config:
    """Runtime configuration for one pdfdigest run.

    All fields correspond to CLI flags.

    Attributes:
        api_url:     Full URL of the generate endpoint (Ollama-style).
        model:       Model identifier sent in every request body.
        max_chars:   Upper bound on the length of each chunk sent to the LLM.
        timeout_s:   Per-request timeout in seconds.  A timeout aborts the run.
        structured:  If True, ask for a JSON summary and parse it.
        language:    Requested summary language code (e.g. ``en``, ``es``).
        output_path: Optional file that receives a copy of the output.
        extractor:   PDF text extraction backend: ``pypdf``, ``docling`` or
                     ``auto`` (docling with pypdf fallback).
        verbose:     If True, log at DEBUG level.
    """

    api_url: str = _DEFAULT_API_URL
    model: str = _DEFAULT_MODEL
    max_chars: int = _DEFAULT_MAX_CHARS
    timeout_s: int = _DEFAULT_TIMEOUT_S
    structured: bool = False
    language: str = "en"
    output_path: Path | None = None
    extractor: Literal["pypdf", "docling", "auto"] = "pypdf"
    verbose: bool = False


# ---------------------------------------------------------------------------
# Exit codes and exceptions
# ---------------------------------------------------------------------------


class ExitCode(IntEnum):
    """Process exit statuses of the ``pdfdigest`` command."""

    OK = 0
    FILE_NOT_FOUND = 1
    NO_TEXT = 2
    EXTRACTION_FAILED = 3
    CHUNK_REQUEST_FAILED = 4
    FINAL_REQUEST_FAILED = 5
    USAGE = 64


class ParseError(Exception):
    """Raised when text cannot be extracted from a PDF (corrupt, encrypted, etc.)."""


class LLMError(Exception):
    """Raised when a request to the LLM endpoint fails.

    Attributes:
        status_code: HTTP status of the response, or ``None`` for transport
                     failures (connection refused, timeout).
        body:        Response body text, if any was received.
    """

    def __init__(
        self, message: str, status_code: int | None = None, body: str | None = None
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class PipelineError(Exception):
    """Wraps a fatal failure of one run together with its exit code.

    Attributes:
        pdf_path:  Path to the PDF being processed.
        cause:     The original exception, or ``None`` for conditions such as
                   an empty extraction.
        exit_code: The ``ExitCode`` the CLI should terminate with.
    """

    def __init__(
        self,
        pdf_path: Path,
        message: str,
        exit_code: ExitCode,
        cause: Exception | None = None,
    ) -> None:
        self.pdf_path = pdf_path
        self.cause = cause
        self.exit_code = exit_code
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(f"{pdf_path.name}: {detail}")
