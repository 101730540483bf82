"""Locate, parse and validate the JSON summary embedded in free-form model output.

``StructuredExtraction`` drives the single-retry policy as a small state
machine::

    UNPARSED --feed ok--> PARSED
    UNPARSED --feed fail--> RETRY_PENDING
    RETRY_PENDING --feed ok--> PARSED
    RETRY_PENDING --feed fail / give_up--> DEGRADED

The orchestrator issues the follow-up request while the machine is in
``RETRY_PENDING``; this module never talks to the LLM itself.
"""

import json
import logging

from pydantic import ValidationError

from pdfdigest.models import ExtractionState, StructuredSummary

logger = logging.getLogger(__name__)


def extract_json(text: str) -> str:
    """Return the outermost ``{...}`` span of ``text``, else ``[...]``, else ``text``.

    The object span runs from the first ``{`` to the last ``}``; it is used
    only when the closing brace comes after the opening one.
    """
    if not text or not text.strip():
        return text

    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        return text[start : end + 1]

    start = text.find("[")
    end = text.rfind("]")
    if start >= 0 and end > start:
        return text[start : end + 1]

    return text


def parse_structured(json_text: str) -> StructuredSummary | None:
    """Deserialize ``json_text`` into a ``StructuredSummary``.

    Returns ``None`` (never raises) on malformed JSON, a non-object root, or
    values that do not fit the schema.
    """
    try:
        data = json.loads(json_text)
    except (json.JSONDecodeError, TypeError) as exc:
        logger.debug("Structured output is not valid JSON: %s", exc)
        return None

    if not isinstance(data, dict):
        logger.debug("Structured output root is %s, not an object", type(data).__name__)
        return None

    try:
        return StructuredSummary.model_validate(data)
    except ValidationError as exc:
        logger.debug("Structured output does not match schema: %s", exc)
        return None


def normalize_language(summary: StructuredSummary, requested: str) -> StructuredSummary:
    """Fill an empty ``language`` with ``requested``; warn on a mismatch."""
    if not summary.language:
        summary.language = requested
    elif summary.language.lower() != requested.lower():
        logger.warning(
            "Model reported language %r but %r was requested; keeping model value",
            summary.language,
            requested,
        )
    return summary


class StructuredExtraction:
    """Single-retry extraction of a ``StructuredSummary`` from model output.

    Attributes:
        language: Requested language code used for post-parse normalization.
        state:    Current ``ExtractionState``.
        summary:  The parsed summary once ``state`` is ``PARSED``.
        raw_text: The first response fed in; printed when ``DEGRADED``.
    """

    def __init__(self, language: str) -> None:
        self.language = language
        self.state = ExtractionState.UNPARSED
        self.summary: StructuredSummary | None = None
        self.raw_text: str | None = None

    @property
    def done(self) -> bool:
        return self.state in (ExtractionState.PARSED, ExtractionState.DEGRADED)

    def feed(self, text: str) -> ExtractionState:
        """Try to parse one model response and advance the state."""
        if self.done:
            raise RuntimeError(f"Cannot feed extraction in state {self.state.value}")

        if self.state is ExtractionState.UNPARSED:
            self.raw_text = text

        parsed = parse_structured(extract_json(text))
        if parsed is not None:
            self.summary = normalize_language(parsed, self.language)
            self.state = ExtractionState.PARSED
        elif self.state is ExtractionState.UNPARSED:
            logger.warning("Structured output could not be parsed; requesting JSON-only retry")
            self.state = ExtractionState.RETRY_PENDING
        else:
            logger.warning("Structured output still invalid after retry; falling back to raw text")
            self.state = ExtractionState.DEGRADED
        return self.state

    def give_up(self) -> ExtractionState:
        """Abandon a pending retry (e.g. the retry request itself failed)."""
        if self.state is not ExtractionState.RETRY_PENDING:
            raise RuntimeError(f"Cannot give up extraction in state {self.state.value}")
        self.state = ExtractionState.DEGRADED
        return self.state
