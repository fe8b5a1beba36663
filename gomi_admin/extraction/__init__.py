"""
PDF extraction - chunked LLM extraction merged into a reviewable draft
"""

from gomi_admin.extraction.chunker import split_text_into_chunks
from gomi_admin.extraction.llm import ExtractionError, extract_from_chunk
from gomi_admin.extraction.merger import merge_extracted_data
from gomi_admin.extraction.pipeline import (
    DraftSaveResult,
    extract_garbage_data,
    read_pdf_text,
    save_extraction_draft,
)
from gomi_admin.extraction.queue import (
    ChunkOutcome,
    ExponentialBackoffDelay,
    FixedDelay,
    SequentialTaskQueue,
)
from gomi_admin.extraction.schemas import ExtractedArea, ExtractedData, ExtractedItem

__all__ = [
    "split_text_into_chunks",
    "ExtractionError",
    "extract_from_chunk",
    "merge_extracted_data",
    "DraftSaveResult",
    "extract_garbage_data",
    "read_pdf_text",
    "save_extraction_draft",
    "ChunkOutcome",
    "ExponentialBackoffDelay",
    "FixedDelay",
    "SequentialTaskQueue",
    "ExtractedArea",
    "ExtractedData",
    "ExtractedItem",
]
