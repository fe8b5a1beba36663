"""
gomi-admin command line.

Examples:
    gomi-admin init-db
    gomi-admin municipalities add 東京都 --en Tokyo
    gomi-admin import schedules.csv --municipality <id>
    gomi-admin normalize --municipality <id>
    gomi-admin extract calendar.pdf --municipality <id> --out draft.json
"""

import argparse
import json
import logging
import sqlite3
import sys
from pathlib import Path

from pydantic import ValidationError

import config
from gomi_admin.common.logging_utils import setup_logging
from gomi_admin.common.migrations import init_database
from gomi_admin.common.store import DocumentStore, get_store
from gomi_admin.extraction import (
    ExtractedData,
    extract_garbage_data,
    read_pdf_text,
    save_extraction_draft,
)
from gomi_admin.importer import (
    ConfirmationRequiredError,
    ImportProgress,
    MunicipalityNotFoundError,
    import_payload,
    normalize_municipality_schedules,
)
from gomi_admin.importer.repository import (
    create_municipality,
    list_municipalities,
    require_municipality,
)
from gomi_admin.ingest import InvalidMonthKeyError, PayloadFormatError, load_import_file

logger = logging.getLogger(__name__)

OPERATOR_ERRORS = (
    PayloadFormatError,
    InvalidMonthKeyError,
    MunicipalityNotFoundError,
    ConfirmationRequiredError,
    FileNotFoundError,
    ValueError,
    RuntimeError,
    sqlite3.Error,
)


def _store(args) -> DocumentStore:
    return DocumentStore(args.db) if args.db else get_store()


def _print_progress(progress: ImportProgress) -> None:
    print(
        f"  cities: {progress.cities}  areas: {progress.areas}  items: {progress.items}",
        end="\r",
        flush=True,
    )


def cmd_init_db(args) -> int:
    path = init_database(args.db)
    print(f"Database ready: {path}")
    return 0


def cmd_municipalities(args) -> int:
    store = _store(args)
    if args.action == "add":
        municipality_id = create_municipality(store, args.prefecture, args.en)
        print(f"Created municipality {args.prefecture}: {municipality_id}")
        return 0

    municipalities = list_municipalities(store)
    if not municipalities:
        print("No municipalities.")
        return 0
    for doc in municipalities:
        english = doc.data.get("prefecture_en")
        label = f"{doc.data.get('prefecture')} ({english})" if english else doc.data.get("prefecture")
        print(f"{doc.id}  {label}")
    return 0


def cmd_import(args) -> int:
    loaded = load_import_file(args.file)
    print(f"Detected format: {loaded.source_format.value}")
    if loaded.skipped_rows:
        print(f"Skipped {loaded.skipped_rows} rows with a wrong column count")

    result = import_payload(
        _store(args),
        args.municipality,
        loaded.payload,
        _print_progress,
        attach_to_existing_areas=loaded.attach_to_existing_areas,
    )
    print()
    print("Import finished:")
    print(" cities:", result.cities)
    print(" areas:", result.areas)
    print(" items:", result.items)
    return 0


def _confirm(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def cmd_normalize(args) -> int:
    store = _store(args)
    municipality = require_municipality(store, args.municipality)
    confirmed = args.yes or _confirm(
        f"Rewrite schedule keys of every area in {municipality.get('prefecture')}?"
    )
    if not confirmed:
        print("Cancelled.")
        return 1

    result = normalize_municipality_schedules(store, args.municipality, confirmed=True)
    print(f"Normalized: {result.normalized}, skipped: {result.skipped}")
    return 0


def cmd_extract(args) -> int:
    config.validate_config()
    store = _store(args)
    municipality = require_municipality(store, args.municipality)

    text = read_pdf_text(args.file)
    draft: ExtractedData = extract_garbage_data(text, municipality.get("prefecture", ""))
    print(f"Extracted {len(draft.areas)} areas and {len(draft.garbageItems)} items")

    if args.out:
        Path(args.out).write_text(
            json.dumps(draft.model_dump(mode="json"), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        print(f"Draft written to {args.out}")

    if args.save:
        result = save_extraction_draft(store, args.municipality, draft)
        print(
            f"Saved {result.areas} areas and {result.items} items "
            f"({result.skipped_areas + result.skipped_items} skipped)"
        )
    elif not args.out:
        print(json.dumps(draft.model_dump(mode="json"), ensure_ascii=False, indent=2))
    return 0


def cmd_save_draft(args) -> int:
    try:
        draft = ExtractedData.model_validate_json(
            Path(args.file).read_text(encoding="utf-8"), context={"strict": True}
        )
    except ValidationError as e:
        raise PayloadFormatError(f"Invalid draft {args.file}: {e}") from e
    result = save_extraction_draft(_store(args), args.municipality, draft)
    print(
        f"Saved {result.areas} areas and {result.items} items "
        f"({result.skipped_areas + result.skipped_items} skipped)"
    )
    return 0


def cmd_serve(args) -> int:
    from gomi_admin.api.app import app

    app.run(host=args.host, port=args.port, debug=config.DEBUG)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gomi-admin", description="Garbage schedule admin")
    parser.add_argument("--db", default=None, help=f"SQLite database (default: {config.DB_PATH})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create the database and apply migrations")
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser("municipalities", help="List or add municipalities")
    p.set_defaults(func=cmd_municipalities)
    actions = p.add_subparsers(dest="action", required=True)
    actions.add_parser("list")
    add = actions.add_parser("add")
    add.add_argument("prefecture")
    add.add_argument("--en", default=None, help="English name")

    p = sub.add_parser("import", help="Import a JSON, CSV or TSV file")
    p.add_argument("file", type=Path)
    p.add_argument("--municipality", required=True)
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("normalize", help="Rewrite YYYY-MM schedule keys to month keys")
    p.add_argument("--municipality", required=True)
    p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    p.set_defaults(func=cmd_normalize)

    p = sub.add_parser("extract", help="Extract a draft from a PDF calendar")
    p.add_argument("file", type=Path)
    p.add_argument("--municipality", required=True)
    p.add_argument("--out", default=None, help="Write the draft JSON to this file")
    p.add_argument("--save", action="store_true", help="Save the draft without review")
    p.set_defaults(func=cmd_extract)

    p = sub.add_parser("save-draft", help="Save a reviewed draft JSON file")
    p.add_argument("file", type=Path)
    p.add_argument("--municipality", required=True)
    p.set_defaults(func=cmd_save_draft)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default=config.API_HOST)
    p.add_argument("--port", type=int, default=config.API_PORT)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    try:
        return args.func(args)
    except OPERATOR_ERRORS as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
