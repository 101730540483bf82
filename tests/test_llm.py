"""Tests for pdfdigest/llm.py — requests-based generate endpoint client."""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from pdfdigest.llm import OllamaClient, call_llm, create_client
from pdfdigest.models import Config, LLMError


def _response(status: int = 200, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status
    response.text = text
    return response


def _client_with(response=None, side_effect=None, timeout_s: int = 30):
    session = MagicMock(spec=requests.Session)
    if side_effect is not None:
        session.post.side_effect = side_effect
    else:
        session.post.return_value = response
    client = OllamaClient(
        model="test-model",
        api_url="http://localhost:11434/api/generate",
        timeout_s=timeout_s,
        session=session,
    )
    return client, session


# ---------------------------------------------------------------------------
# create_client
# ---------------------------------------------------------------------------


def test_create_client_uses_config():
    config = Config(api_url="http://gpu-box:11434/api/generate", model="mistral", timeout_s=12)
    client = create_client(config)
    assert isinstance(client, OllamaClient)
    assert client.model == "mistral"
    assert client.api_url == "http://gpu-box:11434/api/generate"
    assert client.timeout_s == 12


def test_create_client_builds_one_session():
    with patch("pdfdigest.llm.requests.Session") as mock_session:
        create_client(Config())
    mock_session.assert_called_once_with()


# ---------------------------------------------------------------------------
# OllamaClient.generate
# ---------------------------------------------------------------------------


def test_generate_posts_non_streaming_body_with_timeout():
    client, session = _client_with(_response(text='{"response": "ok"}'), timeout_s=42)
    client.generate("hello")

    args, kwargs = session.post.call_args
    assert args == ("http://localhost:11434/api/generate",)
    assert kwargs["json"] == {"model": "test-model", "prompt": "hello", "stream": False}
    assert kwargs["timeout"] == 42


def test_generate_normalizes_response_field():
    client, _ = _client_with(_response(text='{"response": "summary text"}'))
    assert client.generate("p") == "summary text"


def test_generate_returns_plain_text_body():
    client, _ = _client_with(_response(text="just text"))
    assert client.generate("p") == "just text"


def test_generate_concatenates_streamed_fragments():
    body = json.dumps([{"response": "Hel"}, {"response": "lo"}])
    client, _ = _client_with(_response(text=body))
    assert client.generate("p") == "Hello"


def test_generate_raises_on_http_error_status(caplog):
    client, _ = _client_with(_response(status=500, text="model not loaded"))
    with caplog.at_level(logging.ERROR, logger="pdfdigest.llm"):
        with pytest.raises(LLMError) as exc_info:
            client.generate("p")

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "model not loaded"
    assert any("500" in r.message and "model not loaded" in r.message for r in caplog.records)


@pytest.mark.parametrize("status", [301, 304])
def test_generate_raises_on_redirect_status(status):
    client, _ = _client_with(_response(status=status, text='{"response": "stale"}'))
    with pytest.raises(LLMError) as exc_info:
        client.generate("p")
    assert exc_info.value.status_code == status


def test_generate_accepts_any_2xx_status():
    client, _ = _client_with(_response(status=201, text='{"response": "created"}'))
    assert client.generate("p") == "created"


def test_generate_raises_on_connection_error():
    client, _ = _client_with(side_effect=requests.ConnectionError("connection refused"))
    with pytest.raises(LLMError, match="connection refused") as exc_info:
        client.generate("p")
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_generate_raises_on_timeout():
    client, session = _client_with(side_effect=requests.Timeout("read timed out"))
    with pytest.raises(LLMError, match="timed out"):
        client.generate("p")
    assert session.post.call_count == 1


def test_close_closes_session():
    client, session = _client_with(_response())
    client.close()
    session.close.assert_called_once_with()


# ---------------------------------------------------------------------------
# call_llm
# ---------------------------------------------------------------------------


def test_call_llm_returns_generated_text(make_client):
    client = make_client("answer")
    assert call_llm(client, "a prompt") == "answer"
    client.generate.assert_called_once_with("a prompt")


def test_call_llm_propagates_llm_error(make_client):
    client = make_client(LLMError("boom"))
    with pytest.raises(LLMError, match="boom"):
        call_llm(client, "a prompt")


def test_call_llm_logs_call_and_response(caplog, make_client):
    client = make_client("answer")
    with caplog.at_level(logging.DEBUG, logger="pdfdigest.llm"):
        call_llm(client, "a prompt")

    messages = [r.message for r in caplog.records]
    assert any("Calling LLM" in m and "test-model" in m for m in messages)
    assert any("Response received" in m for m in messages)
