"""Shared pytest fixtures for the pdfdigest test suite."""

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pdfdigest.models import Config


# ---------------------------------------------------------------------------
# Logger isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_pdfdigest_logger():
    """Clear the pdfdigest logger between tests.

    Tests that call ``main()`` trigger ``setup_logging()``, which attaches
    handlers and sets ``propagate=False``.  Without this fixture the state
    leaks into subsequent tests and breaks ``caplog`` capture.
    """
    logger = logging.getLogger("pdfdigest")
    for h in logger.handlers[:]:
        try:
            h.close()
        except Exception:
            pass
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    yield
    for h in logger.handlers[:]:
        try:
            h.close()
        except Exception:
            pass
        logger.removeHandler(h)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Common objects
# ---------------------------------------------------------------------------

MOCK_STRUCTURED_DICT = {
    "title": "Spiking Networks for Control",
    "summary": "The paper trains spiking networks end to end for motor control.",
    "key_points": ["End-to-end training", "Simulation only"],
    "language": "en",
    "word_count": 11,
}


@pytest.fixture
def config() -> Config:
    return Config(api_url="http://localhost:11434/api/generate", model="test-model")


@pytest.fixture
def fake_pdf(tmp_path) -> Path:
    """A dummy file that stands in for a PDF (extraction is mocked)."""
    pdf = tmp_path / "document.pdf"
    pdf.write_bytes(b"%PDF-1.4 fake")
    return pdf


@pytest.fixture
def mock_structured_dict() -> dict:
    return dict(MOCK_STRUCTURED_DICT)


@pytest.fixture
def mock_structured_response() -> str:
    """Final answer the model would give in structured mode, with chatter."""
    return f"Here is the summary:\n{json.dumps(MOCK_STRUCTURED_DICT)}\nThanks!"


def _make_client(*answers) -> MagicMock:
    client = MagicMock()
    client.model = "test-model"
    client.api_url = "http://localhost:11434/api/generate"
    client.generate.side_effect = list(answers)
    return client


@pytest.fixture
def make_client():
    """Factory for a mock ``OllamaClient`` whose ``generate`` returns (or
    raises) the given answers in order."""
    return _make_client
