"""
Schedule shape conversion between the legacy month list and the canonical month map.
"""

from collections.abc import Iterable, Mapping

from gomi_admin.ingest.dates import is_legacy_month_key, normalize_month_key
from gomi_admin.ingest.models import Schedule

MIN_DAY = 1
MAX_DAY = 31


def _field(area: object, name: str):
    if isinstance(area, Mapping):
        return area.get(name)
    return getattr(area, name, None)


def _entry_parts(entry: object) -> tuple[str, Mapping]:
    month = _field(entry, "month")
    schedule = _field(entry, "schedule") or {}
    return str(month), schedule


def convert_to_schedule(area: object) -> Schedule:
    """
    Canonical schedule for an area-like record (dict or payload model).

    - canonical ``schedule`` map present: returned unchanged
    - legacy ``monthlySchedules`` list present: month keys normalized,
      day lists copied as-is
    - neither: empty map
    """
    schedule = _field(area, "schedule")
    if schedule is not None:
        return schedule

    monthly = _field(area, "monthlySchedules")
    if monthly is None:
        return {}

    converted: Schedule = {}
    for entry in monthly:
        month, month_schedule = _entry_parts(entry)
        converted[normalize_month_key(month)] = dict(month_schedule)
    return converted


def schedule_needs_normalization(schedule: object) -> bool:
    """True when a persisted schedule map still uses "YYYY-MM" keys."""
    if not isinstance(schedule, Mapping):
        return False
    return any(is_legacy_month_key(key) for key in schedule)


def normalize_schedule_keys(schedule: Mapping) -> Schedule:
    """Rewrite every key of a schedule map to its canonical month key."""
    return {normalize_month_key(key): value for key, value in schedule.items()}


def parse_day_list(value: str) -> list[int]:
    """
    Parse "1, 8, 15" into day numbers.
    Tokens that are not integers or fall outside 1..31 are dropped.
    """
    days = []
    for token in str(value or "").split(","):
        token = token.strip()
        if not token:
            continue
        try:
            day = int(token, 10)
        except ValueError:
            continue
        if MIN_DAY <= day <= MAX_DAY:
            days.append(day)
    return days


def merge_day_lists(existing: Iterable[int], incoming: Iterable[int]) -> list[int]:
    """Union of two day lists, deduplicated and sorted ascending."""
    return sorted(set(existing) | set(incoming))
