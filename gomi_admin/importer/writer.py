"""
Importer - writes a canonical payload under the selected municipality.

Writes happen one at a time with no batching and no rollback: a failing write
propagates and everything written before it stays in the store.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace

from gomi_admin.common.store import DocumentStore, join_path
from gomi_admin.importer.repository import (
    create_area,
    create_area_item,
    create_city,
    city_areas_collection,
    list_areas,
    municipality_areas_collection,
    require_municipality,
)
from gomi_admin.ingest.builders import item_from_payload
from gomi_admin.ingest.models import (
    AreaPayload,
    AreaRecord,
    GarbageItem,
    NewFormatPayload,
    OldFormatPayload,
)
from gomi_admin.ingest.schedule import convert_to_schedule

logger = logging.getLogger(__name__)


@dataclass
class ImportProgress:
    cities: int = 0
    areas: int = 0
    items: int = 0


@dataclass
class ImportResult:
    municipality_id: str
    source_format: str
    cities: int = 0
    areas: int = 0
    items: int = 0


ProgressCallback = Callable[[ImportProgress], None]


def _report(progress: ImportProgress, on_progress: ProgressCallback | None) -> None:
    if on_progress is not None:
        on_progress(replace(progress))


def area_record(area: AreaPayload) -> AreaRecord:
    return AreaRecord(name=area.name, name_en=area.name_en or "", schedule=convert_to_schedule(area))


def _write_items(
    store: DocumentStore,
    area_path: str,
    items: list[GarbageItem],
    progress: ImportProgress,
    on_progress: ProgressCallback | None,
) -> None:
    for item in items:
        create_area_item(store, area_path, item)
        progress.items += 1
        _report(progress, on_progress)


def import_new_format(
    store: DocumentStore,
    municipality_id: str,
    payload: NewFormatPayload,
    on_progress: ProgressCallback | None = None,
) -> ImportResult:
    """
    Write cities and areas of every source municipality under the selected one.

    When the payload carries a global item list, every area gets its own copy
    of every item.
    """
    require_municipality(store, municipality_id)

    if len(payload.municipalities) > 1:
        logger.warning(
            "Payload has %s municipalities; all of them are imported into %s",
            len(payload.municipalities),
            municipality_id,
        )

    items = [item_from_payload(item) for item in payload.garbageItems]
    # Convert every schedule before the first write so bad month keys fail early.
    cities = [
        (city, [area_record(area) for area in city.areas])
        for source in payload.municipalities
        for city in source.cities
    ]

    progress = ImportProgress()
    for city, records in cities:
        city_id = create_city(store, municipality_id, city.name, city.name_en, city.type)
        progress.cities += 1
        _report(progress, on_progress)

        areas_collection = city_areas_collection(municipality_id, city_id)
        for record in records:
            area_id = create_area(store, areas_collection, record)
            progress.areas += 1
            _report(progress, on_progress)
            _write_items(
                store, join_path(areas_collection, area_id), items, progress, on_progress
            )

    logger.info(
        "New-format import into %s: %s cities, %s areas, %s items",
        municipality_id,
        progress.cities,
        progress.areas,
        progress.items,
    )
    return ImportResult(
        municipality_id, "new", progress.cities, progress.areas, progress.items
    )


def import_old_format(
    store: DocumentStore,
    municipality_id: str,
    payload: OldFormatPayload,
    on_progress: ProgressCallback | None = None,
    attach_to_existing_areas: bool = False,
) -> ImportResult:
    """
    Create areas directly under the municipality, then copy the global item list
    onto each created area. Existing areas are never touched unless
    attach_to_existing_areas is set (item tables), in which case an area-less
    payload copies its items onto the areas the municipality already has.
    """
    require_municipality(store, municipality_id)

    items = [item_from_payload(item) for item in payload.garbageItems]
    records = [area_record(area) for area in payload.areas]

    progress = ImportProgress()
    areas_collection = municipality_areas_collection(municipality_id)
    area_paths = []
    for record in records:
        area_id = create_area(store, areas_collection, record)
        area_paths.append(join_path(areas_collection, area_id))
        progress.areas += 1
        _report(progress, on_progress)

    if attach_to_existing_areas and not records and items:
        area_paths = [doc.path for doc in list_areas(store, municipality_id)]
        if not area_paths:
            logger.warning(
                "Municipality %s has no areas; %s items not written",
                municipality_id,
                len(items),
            )

    for area_path in area_paths:
        _write_items(store, area_path, items, progress, on_progress)

    logger.info(
        "Old-format import into %s: %s areas, %s items",
        municipality_id,
        progress.areas,
        progress.items,
    )
    return ImportResult(municipality_id, "old", 0, progress.areas, progress.items)


def import_payload(
    store: DocumentStore,
    municipality_id: str,
    payload: NewFormatPayload | OldFormatPayload,
    on_progress: ProgressCallback | None = None,
    attach_to_existing_areas: bool = False,
) -> ImportResult:
    """Dispatch on the payload generation."""
    if isinstance(payload, NewFormatPayload):
        return import_new_format(store, municipality_id, payload, on_progress)
    if isinstance(payload, OldFormatPayload):
        return import_old_format(
            store, municipality_id, payload, on_progress, attach_to_existing_areas
        )
    raise TypeError(f"Unsupported payload type: {type(payload).__name__}")
