"""
Text chunking for extraction calls.
"""

import config

# A chunk boundary moves forward to the next newline if it is this close.
NEWLINE_WINDOW = 500


def split_text_into_chunks(
    text: str, chunk_size: int | None = None, newline_window: int = NEWLINE_WINDOW
) -> list[str]:
    """
    Split text into consecutive slices of about chunk_size characters.

    A boundary that falls inside a line is extended to just past the next newline
    when that newline starts within newline_window characters. Joining the chunks
    gives back the original text.
    """
    chunk_size = chunk_size or config.EXTRACTION_CHUNK_SIZE
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    chunks = []
    start = 0
    while start < len(text):
        end = start + chunk_size
        if end < len(text):
            next_newline = text.find("\n", end)
            if next_newline != -1 and next_newline < end + newline_window:
                end = next_newline + 1
        chunks.append(text[start:end])
        start = end
    return chunks
