"""LLM prompt builders.

Every prompt is self-contained (the endpoint is stateless); the requested
language code is named explicitly so the model answers in that language.
"""

import json

_SCHEMA_FIELDS = ("title", "summary", "key_points", "language", "word_count")


def schema_example(language: str) -> str:
    """Compact JSON example of the structured summary with ``language`` filled."""
    example = {
        "title": "",
        "summary": "",
        "key_points": [""],
        "language": language,
        "word_count": 0,
    }
    return json.dumps(example, ensure_ascii=False)


def build_chunk_prompt(chunk: str, language: str) -> str:
    """Prompt asking for a summary of one chunk of the document."""
    return (
        f"Summarize the following excerpt of a document. "
        f"Write the summary in the language with code '{language}'.\n"
        f"{chunk}"
    )


def build_final_prompt(summaries: list[str], language: str, structured: bool) -> str:
    """Prompt asking the model to merge the per-chunk summaries into one.

    With ``structured`` set, the model is told to reply with a JSON object
    following the schema and nothing else.
    """
    notes = "\n\n".join(summaries)
    prompt = (
        f"Combine and summarize the following notes into a single clear and "
        f"concise summary, written in the language with code '{language}':\n"
        f"{notes}"
    )
    if structured:
        prompt += (
            f"\nRespond only with a JSON object with the following structure: "
            f"{schema_example(language)}. Do not include any additional text."
        )
    return prompt


def build_json_retry_prompt(previous_response: str, language: str) -> str:
    """Follow-up prompt asking the model to re-emit only valid JSON."""
    fields = ", ".join(_SCHEMA_FIELDS)
    return (
        f"Extract and return only a valid JSON object with the following "
        f"structure: {schema_example(language)} from the text below. "
        f"Use exactly these keys: {fields}. "
        f"Respond ONLY with the JSON (no markdown fences, no explanation):\n\n"
        f"{previous_response}"
    )
