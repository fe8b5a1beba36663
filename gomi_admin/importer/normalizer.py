"""
Bulk normalizer - rewrites persisted "YYYY-MM" schedule keys to month keys in place.
"""

import logging
from dataclasses import dataclass

from gomi_admin.common.store import DocumentStore
from gomi_admin.importer.repository import list_areas, require_municipality
from gomi_admin.ingest.dates import InvalidMonthKeyError
from gomi_admin.ingest.schedule import normalize_schedule_keys, schedule_needs_normalization

logger = logging.getLogger(__name__)


class ConfirmationRequiredError(RuntimeError):
    """Destructive operation attempted without operator confirmation."""


@dataclass
class NormalizeResult:
    municipality_id: str
    normalized: int = 0
    skipped: int = 0


def normalize_municipality_schedules(
    store: DocumentStore, municipality_id: str, confirmed: bool = False
) -> NormalizeResult:
    """
    Normalize the schedules of every area owned directly by the municipality.

    Areas without a schedule map, areas already in canonical shape and areas
    whose keys cannot be normalized are counted as skipped.

    Raises:
        ConfirmationRequiredError: if confirmed is not True
        MunicipalityNotFoundError: if the municipality does not exist
    """
    if not confirmed:
        raise ConfirmationRequiredError(
            "Normalization rewrites area schedules in place; confirm to continue"
        )

    require_municipality(store, municipality_id)
    areas = list_areas(store, municipality_id)
    result = NormalizeResult(municipality_id)

    for area in areas:
        schedule = area.data.get("schedule")
        if not isinstance(schedule, dict) or not schedule_needs_normalization(schedule):
            result.skipped += 1
            continue

        try:
            normalized = normalize_schedule_keys(schedule)
        except InvalidMonthKeyError as e:
            logger.warning("Area %s (%s) skipped: %s", area.id, area.data.get("name"), e)
            result.skipped += 1
            continue

        store.update(area.path, {"schedule": normalized})
        result.normalized += 1
        logger.info(
            "Normalized %s (%s/%s)",
            area.data.get("name"),
            result.normalized + result.skipped,
            len(areas),
        )

    logger.info(
        "Normalization of %s finished: %s normalized, %s skipped",
        municipality_id,
        result.normalized,
        result.skipped,
    )
    return result
