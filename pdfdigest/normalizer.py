"""Turn an LLM endpoint response body into a single plain-text answer.

Ollama-style backends do not agree on one response shape: a mapping with
``response``, a mapping with ``text``, a mapping with an ``output`` list, or a
list of streamed fragments.  The parsed body is classified into a
``ResponseKind`` and dispatched to one handler per kind; ``OTHER`` and any
handler that finds no known field fall back to the raw body.
"""

import json
import logging
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class ResponseKind(Enum):
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OTHER = "other"


def classify(value: Any) -> ResponseKind:
    """Return the kind of a parsed JSON value."""
    if isinstance(value, list):
        return ResponseKind.SEQUENCE
    if isinstance(value, dict):
        return ResponseKind.MAPPING
    return ResponseKind.OTHER


def normalize_response(raw: str) -> str:
    """Extract the answer text from ``raw``; never raises.

    Returns ``raw`` unchanged when it is not JSON or when no known field is
    present.
    """
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        logger.debug("Response is not JSON; using raw text (%d chars)", len(raw))
        return raw

    handler = _HANDLERS[classify(parsed)]
    text = handler(parsed)
    if text is None:
        logger.debug("No known answer field in JSON response; using raw text")
        return raw
    return text


# ---------------------------------------------------------------------------
# Handlers (one per ResponseKind)
# ---------------------------------------------------------------------------


def _from_sequence(items: list) -> str:
    parts: list[str] = []
    for item in items:
        if isinstance(item, dict) and isinstance(item.get("response"), str):
            parts.append(item["response"])
        else:
            parts.append(render_value(item))
    return "".join(parts)


def _from_mapping(obj: dict) -> str | None:
    if "response" in obj:
        return render_value(obj["response"])
    if "text" in obj:
        return render_value(obj["text"])
    if "output" in obj:
        output = obj["output"]
        if isinstance(output, list) and output:
            first = output[0]
            if isinstance(first, dict) and "content" in first:
                return render_value(first["content"])
        return render_value(output)
    return None


def _from_other(value: Any) -> str | None:
    return None


_HANDLERS: dict[ResponseKind, Callable[[Any], str | None]] = {
    ResponseKind.SEQUENCE: _from_sequence,
    ResponseKind.MAPPING: _from_mapping,
    ResponseKind.OTHER: _from_other,
}


def render_value(value: Any) -> str:
    """Textual rendering of a JSON value: strings as-is, null as ``""``,
    anything else as compact JSON."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value, ensure_ascii=False)
