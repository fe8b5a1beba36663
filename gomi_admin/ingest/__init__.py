"""
Ingestion pipeline - format detection, CSV parsing, schedule normalization
"""

from gomi_admin.ingest.categories import CATEGORY_KEYS, CATEGORY_SYNONYMS, Category
from gomi_admin.ingest.dates import InvalidMonthKeyError, normalize_month_key
from gomi_admin.ingest.detector import PayloadFormat, PayloadFormatError
from gomi_admin.ingest.loader import LoadedPayload, load_import_file, load_import_text
from gomi_admin.ingest.schedule import convert_to_schedule, normalize_schedule_keys

__all__ = [
    "CATEGORY_KEYS",
    "CATEGORY_SYNONYMS",
    "Category",
    "InvalidMonthKeyError",
    "normalize_month_key",
    "PayloadFormat",
    "PayloadFormatError",
    "LoadedPayload",
    "load_import_file",
    "load_import_text",
    "convert_to_schedule",
    "normalize_schedule_keys",
]
