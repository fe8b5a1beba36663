"""
Merge per-chunk extraction results into one draft.
"""

import copy
from collections.abc import Iterable

from gomi_admin.extraction.schemas import ExtractedArea, ExtractedData, ExtractedItem
from gomi_admin.ingest.categories import CATEGORY_KEYS
from gomi_admin.ingest.models import Schedule
from gomi_admin.ingest.schedule import merge_day_lists


def _merge_schedule(target: Schedule, incoming: Schedule) -> None:
    for month, month_schedule in incoming.items():
        current = target.get(month)
        if current is None:
            target[month] = copy.deepcopy(month_schedule)
            continue
        for category in CATEGORY_KEYS:
            days = month_schedule.get(category)
            if not days:
                continue
            if category in current:
                current[category] = merge_day_lists(current[category], days)
            else:
                current[category] = list(days)


def merge_extracted_data(results: Iterable[ExtractedData]) -> ExtractedData:
    """
    Combine chunk results in order.

    Areas are matched by exact name and their schedules merged month by month;
    day lists of the same month and category are unioned and sorted. Items are
    deduplicated by exact name, first occurrence wins. Inputs are not modified.
    """
    areas: dict[str, ExtractedArea] = {}
    items: list[ExtractedItem] = []
    item_names: set[str] = set()

    for data in results:
        for area in data.areas:
            existing = areas.get(area.name)
            if existing is None:
                areas[area.name] = area.model_copy(deep=True)
            else:
                _merge_schedule(existing.schedule, area.schedule)

        for item in data.garbageItems:
            if item.name in item_names:
                continue
            item_names.add(item.name)
            items.append(item.model_copy(deep=True))

    return ExtractedData(areas=list(areas.values()), garbageItems=items)
