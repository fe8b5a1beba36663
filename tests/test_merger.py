"""
Tests for merging per-chunk extraction results
"""

from gomi_admin.extraction.merger import merge_extracted_data
from gomi_admin.extraction.schemas import ExtractedData


def _chunk(areas=(), items=()):
    return ExtractedData.model_validate({"areas": list(areas), "garbageItems": list(items)})


def _days(data: ExtractedData) -> dict:
    return {area.name: area.schedule for area in data.areas}


def test_day_lists_union_sorted():
    a = _chunk([{"name": "中央", "schedule": {"4": {"burnable": [1, 4, 8]}}}])
    b = _chunk([{"name": "中央", "schedule": {"4": {"burnable": [4, 11]}}}])

    merged = merge_extracted_data([a, b])
    assert merged.areas[0].schedule == {"4": {"burnable": [1, 4, 8, 11]}}


def test_area_union_is_order_independent():
    a = _chunk(
        [
            {"name": "中央", "schedule": {"4": {"burnable": [1, 8], "cans": [3]}}},
            {"name": "北", "schedule": {"5": {"bottles": [2]}}},
        ]
    )
    b = _chunk(
        [
            {"name": "中央", "schedule": {"4": {"burnable": [15, 8]}, "5": {"burnable": [6]}}},
            {"name": "北", "schedule": {"5": {"bottles": [16]}}},
        ]
    )
    forward = _days(merge_extracted_data([a, b]))
    backward = _days(merge_extracted_data([b, a]))

    assert forward == backward
    assert forward["中央"]["4"]["burnable"] == [1, 8, 15]


def test_missing_month_and_category_are_copied():
    a = _chunk([{"name": "中央", "schedule": {"4": {"burnable": [1]}}}])
    b = _chunk([{"name": "中央", "schedule": {"4": {"cans": [9, 2], "plastics": []}, "6": {"cans": [5]}}}])

    merged = merge_extracted_data([a, b])
    assert merged.areas[0].schedule == {
        "4": {"burnable": [1], "cans": [9, 2]},
        "6": {"cans": [5]},
    }


def test_areas_keep_first_seen_order():
    a = _chunk([{"name": "B"}, {"name": "A"}])
    b = _chunk([{"name": "C"}, {"name": "B"}])
    assert [area.name for area in merge_extracted_data([a, b]).areas] == ["B", "A", "C"]


def test_items_first_occurrence_wins():
    """Later duplicates are dropped along with their other fields"""
    a = _chunk(items=[{"name": "缶", "category": "cans", "description": "最初"}])
    b = _chunk(
        items=[
            {"name": "缶", "category": "nonBurnable", "description": "後", "examples": ["x"]},
            {"name": "びん", "category": "bottles"},
        ]
    )
    merged = merge_extracted_data([a, b])

    assert [item.name for item in merged.garbageItems] == ["缶", "びん"]
    can = merged.garbageItems[0]
    assert (can.category, can.description, can.examples) == ("cans", "最初", [])


def test_inputs_not_modified():
    a = _chunk([{"name": "中央", "schedule": {"4": {"burnable": [1]}}}])
    b = _chunk([{"name": "中央", "schedule": {"4": {"burnable": [2]}, "5": {"cans": [3]}}}])

    merged = merge_extracted_data([a, b])
    merged.areas[0].schedule["5"]["cans"].append(30)

    assert a.areas[0].schedule == {"4": {"burnable": [1]}}
    assert b.areas[0].schedule == {"4": {"burnable": [2]}, "5": {"cans": [3]}}


def test_empty_input():
    merged = merge_extracted_data([])
    assert merged.is_empty()


def test_empty_and_unknown_categories_dropped_in_any_order():
    a = _chunk([{"name": "中央", "schedule": {"4": {"cans": [], "garden": [3]}}}])
    b = _chunk([{"name": "中央", "schedule": {"4": {"burnable": [1]}}}])

    assert a.areas[0].schedule == {}
    assert _days(merge_extracted_data([a, b])) == _days(merge_extracted_data([b, a]))
    assert _days(merge_extracted_data([a, b])) == {"中央": {"4": {"burnable": [1]}}}
