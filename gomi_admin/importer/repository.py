"""
Store layout and CRUD helpers for municipalities, cities, areas and garbage items.

Layout:
    municipalities/{id}/cities/{id}/areas/{id}/garbageItems/{id}   (current)
    municipalities/{id}/areas/{id}/garbageItems/{id}               (old schema)
    garbageItems/{id} with municipalityId                          (oldest, flat)
"""

from datetime import datetime

from gomi_admin.common.store import Document, DocumentNotFoundError, DocumentStore, join_path
from gomi_admin.ingest.models import AreaRecord, CityType, GarbageItem

MUNICIPALITIES = "municipalities"
CITIES = "cities"
AREAS = "areas"
GARBAGE_ITEMS = "garbageItems"


class MunicipalityNotFoundError(DocumentNotFoundError):
    """The selected municipality does not exist in the store."""


def _now() -> str:
    return datetime.now().isoformat()


def municipality_path(municipality_id: str) -> str:
    return join_path(MUNICIPALITIES, municipality_id)


def municipality_areas_collection(municipality_id: str) -> str:
    return join_path(MUNICIPALITIES, municipality_id, AREAS)


def cities_collection(municipality_id: str) -> str:
    return join_path(MUNICIPALITIES, municipality_id, CITIES)


def city_areas_collection(municipality_id: str, city_id: str) -> str:
    return join_path(MUNICIPALITIES, municipality_id, CITIES, city_id, AREAS)


def area_items_collection(area_path: str) -> str:
    return f"{area_path}/{GARBAGE_ITEMS}"


def municipality_area_path(municipality_id: str, area_id: str) -> str:
    return join_path(MUNICIPALITIES, municipality_id, AREAS, area_id)


def area_item_path(area_path: str, item_id: str) -> str:
    return f"{area_items_collection(area_path)}/{join_path(item_id)}"


# Municipalities


def create_municipality(
    store: DocumentStore, prefecture: str, prefecture_en: str | None = None
) -> str:
    if not prefecture or not prefecture.strip():
        raise ValueError("prefecture is required")
    now_str = _now()
    return store.add(
        MUNICIPALITIES,
        {
            "prefecture": prefecture.strip(),
            "prefecture_en": (prefecture_en or "").strip(),
            "createdAt": now_str,
            "updatedAt": now_str,
        },
    )


def list_municipalities(store: DocumentStore) -> list[Document]:
    return store.list_collection(MUNICIPALITIES)


def get_municipality(store: DocumentStore, municipality_id: str) -> dict | None:
    return store.get(municipality_path(municipality_id))


def require_municipality(store: DocumentStore, municipality_id: str) -> dict:
    """
    Municipality document, or MunicipalityNotFoundError.
    """
    municipality = get_municipality(store, municipality_id) if municipality_id else None
    if municipality is None:
        raise MunicipalityNotFoundError(f"Municipality not found: {municipality_id}")
    return municipality


def delete_municipality(store: DocumentStore, municipality_id: str) -> bool:
    return store.delete(municipality_path(municipality_id))


# Cities


def create_city(
    store: DocumentStore,
    municipality_id: str,
    name: str,
    name_en: str | None = None,
    city_type: CityType | None = None,
) -> str:
    data = {"name": name, "name_en": name_en or ""}
    if city_type:
        data["type"] = city_type
    return store.add(cities_collection(municipality_id), data)


def list_cities(store: DocumentStore, municipality_id: str) -> list[Document]:
    return store.list_collection(cities_collection(municipality_id))


# Areas


def create_area(store: DocumentStore, areas_collection: str, record: AreaRecord) -> str:
    return store.add(areas_collection, record.to_document())


def list_areas(store: DocumentStore, municipality_id: str) -> list[Document]:
    """Areas owned directly by the municipality (old schema)."""
    return store.list_collection(municipality_areas_collection(municipality_id))


def require_area(store: DocumentStore, area_path: str) -> dict:
    area = store.get(area_path)
    if area is None:
        raise DocumentNotFoundError(f"Area not found: {area_path}")
    return area


def update_area(store: DocumentStore, area_path: str, record: AreaRecord) -> None:
    store.update(area_path, record.to_document())


def delete_area(store: DocumentStore, area_path: str) -> bool:
    """
    Delete the area document only. Its garbageItems subcollection stays;
    call delete_area_items first to clean it.
    """
    return store.delete(area_path)


def delete_area_items(store: DocumentStore, area_path: str) -> int:
    deleted = 0
    for doc in store.list_collection(area_items_collection(area_path)):
        if store.delete(doc.path):
            deleted += 1
    return deleted


# Garbage items


def create_area_item(store: DocumentStore, area_path: str, item: GarbageItem) -> str:
    now_str = _now()
    return store.add(
        area_items_collection(area_path),
        {**item.to_document(), "createdAt": now_str, "updatedAt": now_str},
    )


def update_area_item(store: DocumentStore, item_path: str, item: GarbageItem) -> None:
    store.update(item_path, {**item.to_document(), "updatedAt": _now()})


def list_area_items(store: DocumentStore, area_path: str) -> list[Document]:
    return store.list_collection(area_items_collection(area_path))


def delete_area_item(store: DocumentStore, item_path: str) -> bool:
    return store.delete(item_path)


def create_flat_item(store: DocumentStore, municipality_id: str, item: GarbageItem) -> str:
    """Item in the flat top-level collection, tagged with its municipality."""
    now_str = _now()
    return store.add(
        GARBAGE_ITEMS,
        {
            "municipalityId": municipality_id,
            **item.to_document(),
            "createdAt": now_str,
            "updatedAt": now_str,
        },
    )


def list_flat_items(store: DocumentStore, municipality_id: str) -> list[Document]:
    return store.where(GARBAGE_ITEMS, "municipalityId", municipality_id)
