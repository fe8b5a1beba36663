"""
Tests for format detection and payload loading
"""

import json

import pytest

from gomi_admin.ingest.detector import (
    PayloadFormat,
    PayloadFormatError,
    classify_table_header,
    detect_json_format,
    detect_table_format,
    parse_json_payload,
)
from gomi_admin.ingest.loader import load_import_file, load_import_text
from gomi_admin.ingest.models import NewFormatPayload, OldFormatPayload
from gomi_admin.ingest.schedule import convert_to_schedule

NEW_FORMAT = {
    "municipalities": [
        {
            "id": "tokyo",
            "prefecture": "東京都",
            "prefecture_en": "Tokyo",
            "cities": [
                {
                    "name": "千代田区",
                    "name_en": "Chiyoda",
                    "type": "ward",
                    "areas": [{"name": "丸の内", "schedule": {"4": {"burnable": [1, 8]}}}],
                }
            ],
        }
    ],
    "garbageItems": [{"name_ja": "新聞", "category": "paper_and_cloth"}],
}

OLD_FORMAT = {
    "areas": [
        {
            "name": "中央",
            "monthlySchedules": [{"month": "2025-04", "schedule": {"burnable": [1, 8, 15, 22]}}],
        }
    ],
    "garbageItems": [{"name": "缶", "category": "cans"}],
}


def test_detect_json_format():
    assert detect_json_format({"municipalities": []}) is PayloadFormat.NEW_JSON
    assert detect_json_format({"areas": []}) is PayloadFormat.OLD_JSON
    assert detect_json_format({"municipalities": "tokyo"}) is PayloadFormat.OLD_JSON


def test_classify_table_header():
    assert classify_table_header(["name", "month", "burnable"]) is PayloadFormat.SCHEDULE_TABLE
    assert classify_table_header(["item_name_ja", "category"]) is PayloadFormat.ITEM_TABLE
    assert classify_table_header(["name", "category"]) is PayloadFormat.UNRECOGNIZED


def test_unrecognized_table_names_both_column_pairs():
    with pytest.raises(PayloadFormatError) as exc_info:
        detect_table_format(["foo", "bar"])
    message = str(exc_info.value)
    assert "name and month" in message
    assert "item_name_ja and category" in message


def test_parse_new_format():
    payload = parse_json_payload(json.dumps(NEW_FORMAT))
    assert isinstance(payload, NewFormatPayload)
    assert payload.municipalities[0].cities[0].areas[0].name == "丸の内"


def test_parse_old_format():
    payload = parse_json_payload(json.dumps(OLD_FORMAT))
    assert isinstance(payload, OldFormatPayload)
    assert convert_to_schedule(payload.areas[0]) == {"4": {"burnable": [1, 8, 15, 22]}}


def test_malformed_json():
    with pytest.raises(PayloadFormatError, match="Invalid JSON"):
        parse_json_payload('{"areas": [')


def test_json_must_be_object():
    with pytest.raises(PayloadFormatError):
        parse_json_payload("[1, 2]")


def test_item_without_name_is_rejected():
    with pytest.raises(PayloadFormatError):
        parse_json_payload(json.dumps({"garbageItems": [{"category": "cans"}]}))


def test_item_with_unknown_category_is_rejected():
    with pytest.raises(PayloadFormatError):
        parse_json_payload(json.dumps({"garbageItems": [{"name": "x", "category": "misc"}]}))


def test_empty_input():
    with pytest.raises(PayloadFormatError, match="empty"):
        load_import_text("   \n")


def test_load_json_with_bom():
    loaded = load_import_text("\ufeff" + json.dumps(OLD_FORMAT))
    assert loaded.source_format is PayloadFormat.OLD_JSON


def test_load_schedule_table():
    text = (
        "name,name_en,month,burnable,resources\n"
        '中央,Chuo,2025-04,"1,8",3\n'
        "中央,Chuo,2025-05,6,\n"
        "北,Kita,2025-04,2\n"
    )
    loaded = load_import_text(text, "schedules.csv")

    assert loaded.source_format is PayloadFormat.SCHEDULE_TABLE
    assert loaded.skipped_rows == 1
    assert [area.name for area in loaded.payload.areas] == ["中央"]
    assert convert_to_schedule(loaded.payload.areas[0]) == {
        "4": {"burnable": [1, 8], "recyclable": [3]},
        "5": {"burnable": [6]},
    }


def test_load_item_table_tsv():
    text = "item_name_ja\tcategory\texamples_ja\n空き缶\tcans\tジュース缶|缶詰\n"
    loaded = load_import_text(text, "items.tsv")

    assert loaded.source_format is PayloadFormat.ITEM_TABLE
    assert loaded.payload.areas == []
    assert loaded.payload.garbageItems[0].examples_ja == ["ジュース缶", "缶詰"]


def test_csv_extension_is_not_parsed_as_json():
    with pytest.raises(PayloadFormatError, match="Unrecognized table format"):
        load_import_text('{"areas": []}', "data.csv")


def test_load_import_file(tmp_path):
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(NEW_FORMAT, ensure_ascii=False), encoding="utf-8")
    loaded = load_import_file(path)
    assert loaded.source_format is PayloadFormat.NEW_JSON
