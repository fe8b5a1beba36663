"""
Record builders - decoded table rows and JSON items -> canonical records
"""

import logging

from gomi_admin.ingest.categories import is_category, map_category_column
from gomi_admin.ingest.models import AreaPayload, GarbageItem, ItemPayload, MonthEntry
from gomi_admin.ingest.schedule import parse_day_list

logger = logging.getLogger(__name__)

EXAMPLES_SEPARATOR = "|"


def split_examples(value: str | None) -> list[str]:
    """'新聞|雑誌| ' -> ['新聞', '雑誌']"""
    if not value:
        return []
    return [part.strip() for part in value.split(EXAMPLES_SEPARATOR) if part.strip()]


def month_schedule_from_row(row: dict[str, str]) -> dict[str, list[int]]:
    """
    Category day lists of one schedule row.

    Only columns known to the synonym table count, and only non-empty day lists
    are kept. When two columns map to the same category the later column wins.
    """
    schedule: dict[str, list[int]] = {}
    for column, value in row.items():
        category = map_category_column(column)
        if category is None:
            continue
        days = parse_day_list(value)
        if days:
            schedule[category] = days
    return schedule


def build_areas_from_schedule_rows(rows: list[dict[str, str]]) -> list[AreaPayload]:
    """
    Group schedule rows by area name into legacy-shaped areas.

    The first row of an area fixes its English name; every row appends one
    {month, schedule} entry to that area's monthlySchedules.
    """
    areas: dict[str, AreaPayload] = {}
    for row_no, row in enumerate(rows, start=1):
        name = (row.get("name") or "").strip()
        month = (row.get("month") or "").strip()
        if not name or not month:
            logger.warning("Schedule row %s: missing name or month - row skipped", row_no)
            continue

        area = areas.get(name)
        if area is None:
            area = AreaPayload(
                name=name,
                name_en=(row.get("name_en") or "").strip() or None,
                monthlySchedules=[],
            )
            areas[name] = area

        area.monthlySchedules.append(
            MonthEntry(month=month, schedule=month_schedule_from_row(row))
        )

    return list(areas.values())


def build_items_from_rows(rows: list[dict[str, str]]) -> list[ItemPayload]:
    """Item-table rows -> item payloads; incomplete or uncategorised rows are skipped."""
    items = []
    for row_no, row in enumerate(rows, start=1):
        name_ja = (row.get("item_name_ja") or "").strip()
        category = (row.get("category") or "").strip()
        if not name_ja or not category:
            logger.warning(
                "Item row %s: item_name_ja and category are required - row skipped", row_no
            )
            continue
        if not is_category(category):
            logger.warning("Item row %s: invalid category %r - row skipped", row_no, category)
            continue

        items.append(
            ItemPayload(
                category=category,
                name_ja=name_ja,
                name_en=row.get("item_name_en") or None,
                description_ja=row.get("description_ja") or None,
                description_en=row.get("description_en") or None,
                examples_ja=split_examples(row.get("examples_ja")),
                examples_en=split_examples(row.get("examples_en")),
            )
        )
    return items


def item_from_payload(item: ItemPayload) -> GarbageItem:
    """
    Canonical item record. Bilingual fields win over the legacy single-language
    ones (name -> name_ja, description -> description_ja, examples -> examples_ja).
    """
    return GarbageItem(
        name_ja=item.name_ja or item.name or "",
        name_en=item.name_en or "",
        category=item.category,
        description_ja=item.description_ja or item.description or "",
        description_en=item.description_en or "",
        examples_ja=list(item.examples_ja or item.examples or []),
        examples_en=list(item.examples_en or []),
    )
