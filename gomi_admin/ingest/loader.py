"""
Entry point of the ingestion pipeline: raw text or file -> canonical payload.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from gomi_admin.ingest.builders import build_areas_from_schedule_rows, build_items_from_rows
from gomi_admin.ingest.csv_parser import parse_table
from gomi_admin.ingest.detector import (
    PayloadFormat,
    PayloadFormatError,
    detect_table_format,
    parse_json_payload,
)
from gomi_admin.ingest.models import NewFormatPayload, OldFormatPayload

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
TABLE_SUFFIXES = (".csv", ".tsv", ".txt")


@dataclass
class LoadedPayload:
    source_format: PayloadFormat
    payload: NewFormatPayload | OldFormatPayload
    skipped_rows: int = 0
    # Item tables carry no areas; their items go to the areas already stored.
    attach_to_existing_areas: bool = False


def _looks_like_json(text: str, filename: str | None) -> bool:
    if filename:
        suffix = Path(filename).suffix.lower()
        if suffix in JSON_SUFFIXES:
            return True
        if suffix in TABLE_SUFFIXES:
            return False
    return text.lstrip().startswith("{")


def load_table_text(text: str) -> LoadedPayload:
    """CSV/TSV text -> old-format payload (areas from a schedule table, items from an item table)."""
    table = parse_table(text)
    table_format = detect_table_format(table.header)

    if table_format is PayloadFormat.SCHEDULE_TABLE:
        payload = OldFormatPayload(areas=build_areas_from_schedule_rows(table.rows))
    else:
        payload = OldFormatPayload(garbageItems=build_items_from_rows(table.rows))

    kept = len(payload.areas) + len(payload.garbageItems)
    logger.info(
        "Loaded %s: %s rows read, %s skipped for column count, %s records built",
        table_format.value,
        len(table.rows),
        len(table.skipped_lines),
        kept,
    )
    return LoadedPayload(
        table_format,
        payload,
        skipped_rows=len(table.skipped_lines),
        attach_to_existing_areas=table_format is PayloadFormat.ITEM_TABLE,
    )


def load_import_text(text: str, filename: str | None = None) -> LoadedPayload:
    """
    Detect the input format and build the canonical payload.

    Raises:
        PayloadFormatError: malformed JSON, invalid payload or unrecognized table header
    """
    if not text or not text.strip():
        raise PayloadFormatError("Input is empty")

    text = text.lstrip("\ufeff")

    if _looks_like_json(text, filename):
        payload = parse_json_payload(text)
        source_format = (
            PayloadFormat.NEW_JSON if payload.format == "new" else PayloadFormat.OLD_JSON
        )
        return LoadedPayload(source_format, payload)

    return load_table_text(text)


def load_import_file(path: Path | str) -> LoadedPayload:
    path = Path(path)
    text = path.read_text(encoding="utf-8-sig")
    return load_import_text(text, filename=path.name)


__all__ = [
    "LoadedPayload",
    "load_import_file",
    "load_import_text",
    "load_table_text",
]
