"""
Tests for record builders (table rows and JSON items)
"""

from gomi_admin.ingest.builders import (
    build_areas_from_schedule_rows,
    build_items_from_rows,
    item_from_payload,
    month_schedule_from_row,
    split_examples,
)
from gomi_admin.ingest.categories import Category
from gomi_admin.ingest.models import ItemPayload
from gomi_admin.ingest.schedule import convert_to_schedule


def test_split_examples():
    assert split_examples("新聞|雑誌| |段ボール") == ["新聞", "雑誌", "段ボール"]
    assert split_examples("") == []
    assert split_examples(None) == []


def test_month_schedule_ignores_unknown_and_empty_columns():
    row = {"name": "中央", "month": "2025-04", "burnable": "1,8", "cans": "", "memo": "5"}
    assert month_schedule_from_row(row) == {"burnable": [1, 8]}


def test_later_synonym_column_wins():
    row = {"burnable": "1", "combustible": "2"}
    assert month_schedule_from_row(row) == {"burnable": [2]}


def test_schedule_rows_grouped_by_area():
    rows = [
        {"name": "中央", "name_en": "Chuo", "month": "2025-04", "burnable": "1,8"},
        {"name": "北", "name_en": "Kita", "month": "2025-04", "burnable": "2"},
        {"name": "中央", "name_en": "Other", "month": "2025-05", "burnable": "6"},
    ]
    areas = build_areas_from_schedule_rows(rows)

    assert [area.name for area in areas] == ["中央", "北"]
    chuo = areas[0]
    assert chuo.name_en == "Chuo"
    assert [entry.month for entry in chuo.monthlySchedules] == ["2025-04", "2025-05"]
    assert convert_to_schedule(chuo) == {"4": {"burnable": [1, 8]}, "5": {"burnable": [6]}}


def test_schedule_rows_without_name_or_month_are_skipped():
    rows = [
        {"name": "", "month": "2025-04", "burnable": "1"},
        {"name": "中央", "month": "", "burnable": "1"},
        {"name": "中央", "month": "2025-04", "burnable": "1"},
    ]
    areas = build_areas_from_schedule_rows(rows)
    assert len(areas) == 1
    assert len(areas[0].monthlySchedules) == 1


def test_item_rows():
    rows = [
        {
            "item_name_ja": "新聞",
            "item_name_en": "Newspaper",
            "category": "paper_and_cloth",
            "description_ja": "ひもで縛る",
            "description_en": "",
            "examples_ja": "新聞|チラシ",
            "examples_en": "",
        },
        {"item_name_ja": "", "category": "cans"},
        {"item_name_ja": "電池", "category": "batteries"},
    ]
    items = build_items_from_rows(rows)

    assert len(items) == 1
    item = items[0]
    assert item.category is Category.PAPER_AND_CLOTH
    assert item.name_ja == "新聞"
    assert item.name_en == "Newspaper"
    assert item.description_en is None
    assert item.examples_ja == ["新聞", "チラシ"]
    assert item.examples_en == []


def test_item_from_legacy_payload():
    """Legacy single-language fields fill the Japanese fields"""
    payload = ItemPayload(category="cans", name="缶", description="洗って出す", examples=["空き缶"])
    item = item_from_payload(payload)

    assert item.name_ja == "缶"
    assert item.name_en == ""
    assert item.description_ja == "洗って出す"
    assert item.description_en == ""
    assert item.examples_ja == ["空き缶"]
    assert item.examples_en == []


def test_bilingual_fields_win_over_legacy():
    payload = ItemPayload(category="cans", name="古い", name_ja="缶", name_en="Can")
    item = item_from_payload(payload)
    assert item.name_ja == "缶"
    assert item.name_en == "Can"
    assert item.to_document()["category"] == "cans"
