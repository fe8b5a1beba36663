"""
Tests for the gomi-admin command line
"""

import json
from unittest.mock import patch

from gomi_admin.cli import main
from gomi_admin.extraction.schemas import ExtractedData
from gomi_admin.importer.repository import list_areas, municipality_areas_collection


def _run(db_path, *args):
    return main(["--db", str(db_path), *args])


def test_init_db(tmp_path, capsys):
    db_path = tmp_path / "nested" / "gomi.db"
    assert _run(db_path, "init-db") == 0
    assert db_path.exists()
    assert "Database ready" in capsys.readouterr().out


def test_municipalities_add_and_list(temp_db_path, capsys):
    assert _run(temp_db_path, "municipalities", "add", "東京都", "--en", "Tokyo") == 0
    assert _run(temp_db_path, "municipalities", "list") == 0
    out = capsys.readouterr().out
    assert "Created municipality 東京都" in out
    assert "東京都 (Tokyo)" in out


def test_import_file(temp_db_path, store, municipality_id, tmp_path, capsys):
    payload = {
        "areas": [{"name": "中央", "monthlySchedules": [{"month": "2025-04", "schedule": {"burnable": [1]}}]}],
        "garbageItems": [{"name": "缶", "category": "cans"}],
    }
    path = tmp_path / "old.json"
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")

    assert _run(temp_db_path, "import", str(path), "--municipality", municipality_id) == 0

    out = capsys.readouterr().out
    assert "Detected format: old" in out
    assert "Import finished" in out
    assert list_areas(store, municipality_id)[0].data["schedule"] == {"4": {"burnable": [1]}}


def test_import_errors_exit_with_1(temp_db_path, municipality_id, tmp_path, capsys):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    assert _run(temp_db_path, "import", str(path), "--municipality", municipality_id) == 1
    assert "Error: Invalid JSON" in capsys.readouterr().err


def test_import_unknown_municipality(temp_db_path, tmp_path, capsys):
    path = tmp_path / "items.csv"
    path.write_text("item_name_ja,category\n缶,cans\n", encoding="utf-8")

    assert _run(temp_db_path, "import", str(path), "--municipality", "missing") == 1
    assert "Municipality not found" in capsys.readouterr().err


def test_normalize_with_yes(temp_db_path, store, municipality_id, capsys):
    store.add(municipality_areas_collection(municipality_id), {"name": "中央", "schedule": {"2025-04": {}}})

    assert _run(temp_db_path, "normalize", "--municipality", municipality_id, "--yes") == 0
    assert "Normalized: 1, skipped: 0" in capsys.readouterr().out


def test_normalize_cancelled(temp_db_path, store, municipality_id, capsys):
    store.add(municipality_areas_collection(municipality_id), {"name": "中央", "schedule": {"2025-04": {}}})

    with patch("builtins.input", return_value="n"):
        assert _run(temp_db_path, "normalize", "--municipality", municipality_id) == 1

    assert "Cancelled." in capsys.readouterr().out
    assert list_areas(store, municipality_id)[0].data["schedule"] == {"2025-04": {}}


def test_extract_writes_draft(temp_db_path, municipality_id, tmp_path, fake_ai_keys, capsys):
    source = tmp_path / "calendar.txt"
    source.write_text("中央 4月 燃やすごみ 1", encoding="utf-8")
    out_path = tmp_path / "draft.json"
    draft = ExtractedData.model_validate({"areas": [{"name": "中央", "schedule": {"4": {"burnable": [1]}}}]})

    with patch("gomi_admin.cli.extract_garbage_data", return_value=draft) as extract:
        code = _run(
            temp_db_path, "extract", str(source), "--municipality", municipality_id, "--out", str(out_path)
        )

    assert code == 0
    extract.assert_called_once_with("中央 4月 燃やすごみ 1", "東京都")
    assert json.loads(out_path.read_text(encoding="utf-8"))["areas"][0]["name"] == "中央"
    assert "Extracted 1 areas and 0 items" in capsys.readouterr().out


def test_extract_needs_ai_key(temp_db_path, municipality_id, tmp_path, no_ai_keys, capsys):
    source = tmp_path / "calendar.txt"
    source.write_text("text", encoding="utf-8")

    assert _run(temp_db_path, "extract", str(source), "--municipality", municipality_id) == 1
    assert "No AI provider API keys" in capsys.readouterr().err


def test_save_draft(temp_db_path, store, municipality_id, tmp_path, capsys):
    path = tmp_path / "draft.json"
    path.write_text(
        json.dumps({"areas": [{"name": "北", "schedule": {"5": {"cans": [2]}}}], "garbageItems": []}),
        encoding="utf-8",
    )
    assert _run(temp_db_path, "save-draft", str(path), "--municipality", municipality_id) == 0
    assert [doc.data["name"] for doc in list_areas(store, municipality_id)] == ["北"]
    assert "Saved 1 areas and 0 items" in capsys.readouterr().out


def test_save_draft_invalid_file(temp_db_path, municipality_id, tmp_path, capsys):
    path = tmp_path / "draft.json"
    path.write_text(json.dumps({"areas": [{"schedule": {}}]}), encoding="utf-8")

    assert _run(temp_db_path, "save-draft", str(path), "--municipality", municipality_id) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: Invalid draft")
    assert "Traceback" not in err


def test_save_draft_not_json(temp_db_path, municipality_id, tmp_path, capsys):
    path = tmp_path / "draft.json"
    path.write_text("not json", encoding="utf-8")

    assert _run(temp_db_path, "save-draft", str(path), "--municipality", municipality_id) == 1
    assert "Error: Invalid draft" in capsys.readouterr().err


def test_municipalities_add_blank_prefecture(temp_db_path, capsys):
    assert _run(temp_db_path, "municipalities", "add", "  ") == 1
    assert "Error: prefecture is required" in capsys.readouterr().err
