"""
PDF -> extraction draft -> store.

The draft is meant for operator review; nothing is written until
save_extraction_draft is called.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path

import pdfplumber

import config
from gomi_admin.common.store import DocumentStore
from gomi_admin.extraction.chunker import split_text_into_chunks
from gomi_admin.extraction.llm import extract_from_chunk
from gomi_admin.extraction.merger import merge_extracted_data
from gomi_admin.extraction.queue import FixedDelay, SequentialTaskQueue
from gomi_admin.extraction.schemas import ExtractedData
from gomi_admin.importer.repository import (
    create_area,
    create_flat_item,
    municipality_areas_collection,
    require_municipality,
)
from gomi_admin.ingest.categories import is_category
from gomi_admin.ingest.dates import InvalidMonthKeyError
from gomi_admin.ingest.models import AreaRecord, GarbageItem
from gomi_admin.ingest.schedule import normalize_schedule_keys, schedule_needs_normalization

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = (".txt", ".text")

ChunkExtractor = Callable[[str, str, int, int], ExtractedData]


@dataclass
class DraftSaveResult:
    municipality_id: str
    areas: int = 0
    items: int = 0
    skipped_areas: int = 0
    skipped_items: int = 0


def read_pdf_text(path: Path | str) -> str:
    """Text of every page joined by newlines. Plain-text files are read as UTF-8."""
    path = Path(path)
    if path.suffix.lower() in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8")

    with pdfplumber.open(path) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]
    logger.info("Read %s pages from %s", len(pages), path.name)
    return "\n".join(pages)


def extract_garbage_data(
    text: str,
    municipality_name: str,
    queue: SequentialTaskQueue | None = None,
    extractor: ChunkExtractor = extract_from_chunk,
) -> ExtractedData:
    """
    Chunk the text, extract every chunk in sequence and merge the results.
    Failed chunks contribute nothing.
    """
    chunks = split_text_into_chunks(text, config.EXTRACTION_CHUNK_SIZE)
    logger.info("Split text into %s chunks", len(chunks))

    queue = queue or SequentialTaskQueue(FixedDelay(config.EXTRACTION_DELAY_SECONDS))
    tasks = [
        partial(extractor, chunk, municipality_name, index, len(chunks))
        for index, chunk in enumerate(chunks)
    ]
    outcomes = queue.run(tasks)

    failed = sum(1 for outcome in outcomes if not outcome.ok)
    merged = merge_extracted_data(outcome.data for outcome in outcomes)
    logger.info(
        "Merged extraction: %s areas, %s items (%s of %s chunks failed)",
        len(merged.areas),
        len(merged.garbageItems),
        failed,
        len(outcomes),
    )
    return merged


def save_extraction_draft(
    store: DocumentStore, municipality_id: str, draft: ExtractedData
) -> DraftSaveResult:
    """
    Write a reviewed draft: areas under the municipality, items to the flat
    garbageItems collection tagged with municipalityId.

    Raises:
        MunicipalityNotFoundError: if the municipality does not exist
    """
    require_municipality(store, municipality_id)
    result = DraftSaveResult(municipality_id)
    areas_collection = municipality_areas_collection(municipality_id)

    for area in draft.areas:
        schedule = area.schedule
        if schedule_needs_normalization(schedule):
            try:
                schedule = normalize_schedule_keys(schedule)
            except InvalidMonthKeyError as e:
                logger.warning("Draft area %r skipped: %s", area.name, e)
                result.skipped_areas += 1
                continue
        create_area(store, areas_collection, AreaRecord(name=area.name, schedule=schedule))
        result.areas += 1

    for item in draft.garbageItems:
        if not is_category(item.category):
            logger.warning("Draft item %r skipped: invalid category %r", item.name, item.category)
            result.skipped_items += 1
            continue
        create_flat_item(
            store,
            municipality_id,
            GarbageItem(
                name_ja=item.name,
                category=item.category,
                description_ja=item.description,
                examples_ja=list(item.examples),
            ),
        )
        result.items += 1

    logger.info(
        "Saved draft for %s: %s areas, %s items (%s areas, %s items skipped)",
        municipality_id,
        result.areas,
        result.items,
        result.skipped_areas,
        result.skipped_items,
    )
    return result
