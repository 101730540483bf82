"""LLM endpoint client — posts prompts to an Ollama-style ``/api/generate`` URL.

The public interface is ``OllamaClient.generate(prompt)`` returning the
normalized answer text.  One client (and one ``requests.Session``) is created
per run and injected into the pipeline; there is no transport-level retry.
"""

import logging
import time

import requests

from pdfdigest.models import Config, LLMError
from pdfdigest.normalizer import normalize_response

logger = logging.getLogger(__name__)

_MAX_LOGGED_BODY = 500


class OllamaClient:
    """Synchronous client for a non-streaming generate endpoint.

    Attributes:
        model:     The model identifier sent in every request body.
        api_url:   Full URL the request is POSTed to.
        timeout_s: Per-request timeout in seconds.
    """

    def __init__(
        self,
        model: str,
        api_url: str,
        timeout_s: int = 30,
        session: requests.Session | None = None,
    ) -> None:
        self.model = model
        self.api_url = api_url
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """POST ``prompt`` and return the normalized response text.

        Raises:
            LLMError: on connection failure, timeout, or a non-2xx status.
        """
        payload = {"model": self.model, "prompt": prompt, "stream": False}
        try:
            response = self._session.post(
                self.api_url, json=payload, timeout=self.timeout_s
            )
        except requests.RequestException as exc:
            logger.error("HTTP request to %s failed: %s", self.api_url, exc)
            raise LLMError(f"HTTP request failed: {exc}") from exc

        body = response.text
        if not 200 <= response.status_code < 300:
            logger.error(
                "Endpoint responded with %d: %s",
                response.status_code,
                body[:_MAX_LOGGED_BODY],
            )
            raise LLMError(
                f"Endpoint responded with {response.status_code}",
                status_code=response.status_code,
                body=body,
            )
        return normalize_response(body)

    def close(self) -> None:
        self._session.close()


def create_client(config: Config) -> OllamaClient:
    """Create a client from configuration."""
    return OllamaClient(
        model=config.model,
        api_url=config.api_url,
        timeout_s=config.timeout_s,
    )


def call_llm(client: OllamaClient, prompt: str) -> str:
    """Send a prompt and return the answer text, logging timing diagnostics.

    Raises:
        LLMError: propagated from ``client.generate``.
    """
    logger.debug("Calling LLM  model=%s  endpoint=%s", client.model, client.api_url)
    logger.debug("Prompt size: %s chars", f"{len(prompt):,}")
    t0 = time.monotonic()
    text = client.generate(prompt)
    elapsed = time.monotonic() - t0
    logger.debug("Response received (%.1fs, %s chars)", elapsed, f"{len(text):,}")
    return text
