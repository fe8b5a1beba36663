"""
Format detection for import payloads (JSON generations and CSV table kinds)
"""

import json
from enum import Enum

from pydantic import TypeAdapter, ValidationError

from gomi_admin.ingest.models import ImportPayload, NewFormatPayload, OldFormatPayload

SCHEDULE_TABLE_COLUMNS = ("name", "month")
ITEM_TABLE_COLUMNS = ("item_name_ja", "category")


class PayloadFormat(str, Enum):
    NEW_JSON = "new"
    OLD_JSON = "old"
    SCHEDULE_TABLE = "schedule_table"
    ITEM_TABLE = "item_table"
    UNRECOGNIZED = "unrecognized"


class PayloadFormatError(ValueError):
    """Input could not be parsed or does not match any supported format."""


_PAYLOAD_ADAPTER = TypeAdapter(ImportPayload)


def detect_json_format(data: object) -> PayloadFormat:
    """New format is marked by a top-level `municipalities` array; anything else is the old format."""
    if isinstance(data, dict) and isinstance(data.get("municipalities"), list):
        return PayloadFormat.NEW_JSON
    return PayloadFormat.OLD_JSON


def classify_table_header(header: list[str]) -> PayloadFormat:
    columns = set(header)
    if all(col in columns for col in SCHEDULE_TABLE_COLUMNS):
        return PayloadFormat.SCHEDULE_TABLE
    if all(col in columns for col in ITEM_TABLE_COLUMNS):
        return PayloadFormat.ITEM_TABLE
    return PayloadFormat.UNRECOGNIZED


def detect_table_format(header: list[str]) -> PayloadFormat:
    """
    Classify a table by its header row.

    Raises:
        PayloadFormatError: if neither required column pair is present
    """
    table_format = classify_table_header(header)
    if table_format is PayloadFormat.UNRECOGNIZED:
        raise PayloadFormatError(
            "Unrecognized table format: header must contain either "
            f"{' and '.join(SCHEDULE_TABLE_COLUMNS)} (schedule table) or "
            f"{' and '.join(ITEM_TABLE_COLUMNS)} (item table)"
        )
    return table_format


def parse_json_payload(text: str) -> NewFormatPayload | OldFormatPayload:
    """
    Parse JSON text into the matching payload model.

    Raises:
        PayloadFormatError: on malformed JSON or a payload that fails validation
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PayloadFormatError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise PayloadFormatError("JSON payload must be an object")

    payload_format = detect_json_format(data)
    try:
        return _PAYLOAD_ADAPTER.validate_python({**data, "format": payload_format.value})
    except ValidationError as e:
        raise PayloadFormatError(f"Invalid {payload_format.value}-format payload: {e}") from e
