"""Per-document orchestration — converts one PDF into a ``DigestResult``.

Steps: extract text, chunk, summarize each chunk (strictly one request at a
time), combine the partial summaries in one final request, and, in
structured mode, parse the JSON answer with at most one retry.
"""

import logging
from pathlib import Path

from pdfdigest.chunker import split_into_chunks
from pdfdigest.llm import OllamaClient, call_llm, create_client
from pdfdigest.models import (
    Config,
    DigestResult,
    ExitCode,
    ExtractionState,
    LLMError,
    ParseError,
    PipelineError,
)
from pdfdigest.parser import extract_text
from pdfdigest.prompts import (
    build_chunk_prompt,
    build_final_prompt,
    build_json_retry_prompt,
)
from pdfdigest.structured import StructuredExtraction

logger = logging.getLogger(__name__)


def digest_pdf(
    pdf_path: Path, config: Config, client: OllamaClient | None = None
) -> DigestResult:
    """Process one PDF end-to-end and return its summary.

    Args:
        pdf_path: PDF to summarize.
        config:   Runtime configuration.
        client:   LLM client to use.  When omitted, one is created from
                  ``config`` and closed before returning.

    Raises:
        PipelineError: carrying the ``ExitCode`` for extraction failures,
            empty documents, and failed chunk or final requests.
    """
    text = _extract(pdf_path, config)
    chunks = split_into_chunks(text, config.max_chars)
    logger.info(
        "Document split into %d chunk(s) of <= %d chars", len(chunks), config.max_chars
    )

    if client is not None:
        return _digest_chunks(pdf_path, chunks, client, config)

    client = create_client(config)
    try:
        return _digest_chunks(pdf_path, chunks, client, config)
    finally:
        client.close()


def _digest_chunks(
    pdf_path: Path, chunks: list[str], client: OllamaClient, config: Config
) -> DigestResult:
    summaries = _summarize_chunks(pdf_path, chunks, client, config)

    final_prompt = build_final_prompt(summaries, config.language, config.structured)
    logger.info("Combining %d partial summaries", len(summaries))
    try:
        final_text = call_llm(client, final_prompt)
    except LLMError as exc:
        raise PipelineError(
            pdf_path, "Final request failed", ExitCode.FINAL_REQUEST_FAILED, exc
        ) from exc

    result = DigestResult(text=final_text.strip(), chunk_count=len(chunks))
    if config.structured:
        extraction = _extract_structured(final_text, client, config)
        result.structured = extraction.summary
        result.extraction_state = extraction.state
    return result


def _extract(pdf_path: Path, config: Config) -> str:
    try:
        text = extract_text(pdf_path, extractor=config.extractor)
    except ParseError as exc:
        raise PipelineError(
            pdf_path, "Failed to extract PDF text", ExitCode.EXTRACTION_FAILED, exc
        ) from exc
    if not text or not text.strip():
        raise PipelineError(pdf_path, "No text extracted from PDF", ExitCode.NO_TEXT)
    return text


def _summarize_chunks(
    pdf_path: Path, chunks: list[str], client: OllamaClient, config: Config
) -> list[str]:
    summaries: list[str] = []
    total = len(chunks)
    for index, chunk in enumerate(chunks, start=1):
        logger.info("Summarizing chunk %d/%d (%s chars)", index, total, f"{len(chunk):,}")
        prompt = build_chunk_prompt(chunk, config.language)
        try:
            answer = call_llm(client, prompt)
        except LLMError as exc:
            raise PipelineError(
                pdf_path,
                f"Request failed for chunk {index}/{total}",
                ExitCode.CHUNK_REQUEST_FAILED,
                exc,
            ) from exc
        summaries.append(answer.strip())
    return summaries


def _extract_structured(
    final_text: str, client: OllamaClient, config: Config
) -> StructuredExtraction:
    """Run the parse / retry-once / degrade sequence on the final answer."""
    extraction = StructuredExtraction(config.language)
    extraction.feed(final_text)

    if extraction.state is ExtractionState.RETRY_PENDING:
        retry_prompt = build_json_retry_prompt(final_text, config.language)
        try:
            retry_text = call_llm(client, retry_prompt)
        except LLMError as exc:
            logger.warning("JSON retry request failed (%s); falling back to raw text", exc)
            extraction.give_up()
        else:
            extraction.feed(retry_text)
    return extraction
