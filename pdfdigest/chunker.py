"""Split extracted document text into bounded chunks on natural boundaries."""

import logging

logger = logging.getLogger(__name__)


def split_into_chunks(text: str, max_chars: int) -> list[str]:
    """Split ``text`` into trimmed, non-empty chunks of at most ``max_chars``.

    Each window of ``max_chars`` characters is cut at its last newline, else
    at its last space, else hard at the window end; the final window, which
    reaches the end of the text, is kept whole.  A boundary at offset 0 of
    the window does not count, so every step advances by at least one
    character.  Whitespace following a cut is skipped.

    Args:
        text:      Full document text.
        max_chars: Maximum chunk length; must be >= 1.

    Returns:
        Chunks in original left-to-right order.  Empty or whitespace-only
        input yields an empty list.

    Raises:
        ValueError: if ``max_chars`` is less than 1.
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be >= 1, got {max_chars}")

    chunks: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        window = text[pos : pos + max_chars]
        if pos + max_chars >= length:
            # Remainder fits: take it whole.
            break_at = len(window)
        else:
            break_at = window.rfind("\n")
            if break_at <= 0:
                break_at = window.rfind(" ")
            if break_at <= 0:
                break_at = len(window)

        chunk = window[:break_at].strip()
        if chunk:
            chunks.append(chunk)

        pos += break_at
        while pos < length and text[pos].isspace():
            pos += 1

    logger.debug(
        "Split %s chars into %d chunk(s) (max_chars=%d)",
        f"{length:,}",
        len(chunks),
        max_chars,
    )
    return chunks
