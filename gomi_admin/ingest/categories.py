"""
Canonical garbage categories and the column-name synonym table.
"""

from enum import Enum
from types import MappingProxyType


class Category(str, Enum):
    BURNABLE = "burnable"
    NON_BURNABLE = "nonBurnable"
    RECYCLABLE = "recyclable"
    BOTTLES = "bottles"
    CANS = "cans"
    PLASTICS = "plastics"
    PET_BOTTLES = "pet_bottles"
    PAPER_AND_CLOTH = "paper_and_cloth"
    HAZARDOUS_AND_DANGEROUS = "hazardous_and_dangerous"
    COOKING_OIL = "cooking_oil"


CATEGORY_KEYS: tuple[str, ...] = tuple(c.value for c in Category)

CATEGORY_LABELS = MappingProxyType(
    {
        "burnable": {"ja": "燃やすごみ", "en": "Burnable Waste"},
        "nonBurnable": {"ja": "燃やさないごみ", "en": "Non-Burnable Waste"},
        "recyclable": {"ja": "資源ごみ", "en": "Recyclables"},
        "bottles": {"ja": "びん", "en": "Bottles"},
        "cans": {"ja": "かん", "en": "Cans"},
        "plastics": {"ja": "容器包装プラスチック", "en": "Plastic Containers"},
        "pet_bottles": {"ja": "ペットボトル", "en": "PET Bottles"},
        "paper_and_cloth": {"ja": "古布・紙類", "en": "Paper & Cloth"},
        "hazardous_and_dangerous": {"ja": "危険・有害ごみ", "en": "Hazardous Waste"},
        "cooking_oil": {"ja": "家庭廃食用油", "en": "Cooking Oil"},
    }
)

# Source column spellings seen in exported schedule tables, per canonical category.
_SYNONYMS: dict[str, tuple[str, ...]] = {
    "burnable": (
        "burnable",
        "burnable_dates",
        "burnable_waste",
        "combustible",
        "moeru",
        "燃やすごみ",
        "可燃ごみ",
    ),
    "nonBurnable": (
        "nonburnable",
        "non_burnable",
        "non-burnable",
        "nonburnable_dates",
        "non_burnable_dates",
        "incombustible",
        "moenai",
        "metal_pottery_glass",
        "燃やさないごみ",
        "不燃ごみ",
    ),
    "recyclable": (
        "recyclable",
        "recyclables",
        "recyclable_dates",
        "resources",
        "resource",
        "resource_dates",
        "資源ごみ",
        "資源物",
    ),
    "bottles": (
        "bottles",
        "bottle",
        "bottle_dates",
        "bottles_dates",
        "glass",
        "bottles_and_cans",
        "びん",
    ),
    "cans": ("cans", "can", "can_dates", "cans_dates", "かん", "缶"),
    "plastics": (
        "plastics",
        "plastic",
        "plastic_dates",
        "plastics_dates",
        "plastic_containers",
        "容器包装プラスチック",
        "プラスチック",
    ),
    "pet_bottles": (
        "pet_bottles",
        "petbottles",
        "pet_bottle",
        "pet",
        "pet_bottle_dates",
        "pet_bottles_dates",
        "ペットボトル",
    ),
    "paper_and_cloth": (
        "paper_and_cloth",
        "paper_cloth",
        "paper",
        "cloth",
        "paper_dates",
        "古布・紙類",
        "紙類",
    ),
    "hazardous_and_dangerous": (
        "hazardous_and_dangerous",
        "hazardous",
        "dangerous",
        "hazardous_dates",
        "危険・有害ごみ",
        "有害ごみ",
    ),
    "cooking_oil": (
        "cooking_oil",
        "oil",
        "cooking_oil_dates",
        "waste_oil",
        "家庭廃食用油",
        "廃食用油",
    ),
}


def _build_synonym_table() -> MappingProxyType:
    table: dict[str, str] = {}
    for canonical, spellings in _SYNONYMS.items():
        for spelling in (canonical, *spellings):
            key = spelling.strip().lower()
            existing = table.get(key)
            if existing is not None and existing != canonical:
                raise ValueError(f"Synonym {spelling!r} maps to both {existing} and {canonical}")
            table[key] = canonical
    return MappingProxyType(table)


CATEGORY_SYNONYMS = _build_synonym_table()


def map_category_column(column_name: str) -> str | None:
    """Canonical category for a source column name, or None if it is not a category column."""
    if not column_name:
        return None
    return CATEGORY_SYNONYMS.get(column_name.strip().lower())


def is_category(value: str) -> bool:
    return value in CATEGORY_KEYS
