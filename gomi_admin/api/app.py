"""
Flask API for the garbage schedule admin
"""

import logging
import sqlite3
import tempfile
from pathlib import Path

from flasgger import Swagger
from flask import Flask, jsonify, redirect, request
from pydantic import ValidationError

import config
from gomi_admin.common.logging_utils import setup_logging
from gomi_admin.common.store import DocumentNotFoundError, get_store
from gomi_admin.extraction import ExtractedData, extract_garbage_data, save_extraction_draft
from gomi_admin.extraction.pipeline import read_pdf_text
from gomi_admin.importer import (
    ConfirmationRequiredError,
    import_payload,
    normalize_municipality_schedules,
)
from gomi_admin.importer.repository import (
    area_item_path,
    create_area,
    create_area_item,
    create_municipality,
    delete_area,
    delete_area_item,
    delete_area_items,
    delete_municipality,
    list_area_items,
    list_areas,
    list_municipalities,
    municipality_area_path,
    municipality_areas_collection,
    require_area,
    require_municipality,
    update_area,
    update_area_item,
)
from gomi_admin.ingest import InvalidMonthKeyError, PayloadFormatError, load_import_text
from gomi_admin.ingest.models import AreaRecord, GarbageItem
from gomi_admin.ingest.schedule import normalize_schedule_keys, schedule_needs_normalization

setup_logging()
logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["DEBUG"] = config.DEBUG


swagger_config = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/apispec.json",
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api-docs",
}

swagger_template = {
    "swagger": "2.0",
    "info": {
        "title": "Gomi Admin API",
        "description": "Import, normalize and extract garbage collection schedules.",
        "version": "1.0.0",
    },
    "host": f"localhost:{config.API_PORT}",
    "basePath": "/api/v1",
    "schemes": ["http"],
}

Swagger(app, config=swagger_config, template=swagger_template)


@app.errorhandler(DocumentNotFoundError)
def handle_not_found(e):
    return jsonify({"error": str(e)}), 404


@app.errorhandler(PayloadFormatError)
@app.errorhandler(InvalidMonthKeyError)
@app.errorhandler(ConfirmationRequiredError)
def handle_bad_request(e):
    return jsonify({"error": str(e)}), 400


@app.errorhandler(ValidationError)
def handle_invalid_body(e):
    return jsonify({"error": f"Invalid request body: {e}"}), 400


@app.errorhandler(sqlite3.Error)
def handle_store_error(e):
    logger.exception("Store error")
    return jsonify({"error": f"Store error: {e}"}), 500


@app.route("/")
def index():
    return redirect("/api-docs")


@app.route("/api/v1/municipalities", methods=["GET"])
def api_municipalities():
    """
    List municipalities
    ---
    tags:
      - Municipalities
    responses:
      200:
        description: All municipalities in creation order
        schema:
          type: object
          properties:
            municipalities:
              type: array
              items:
                type: object
                properties:
                  id:
                    type: string
                  prefecture:
                    type: string
                  prefecture_en:
                    type: string
    """
    store = get_store()
    municipalities = [{"id": doc.id, **doc.data} for doc in list_municipalities(store)]
    return jsonify({"municipalities": municipalities})


@app.route("/api/v1/municipalities", methods=["POST"])
def api_create_municipality():
    """
    Create a municipality
    ---
    tags:
      - Municipalities
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          required:
            - prefecture
          properties:
            prefecture:
              type: string
            prefecture_en:
              type: string
    responses:
      201:
        description: Created municipality id
      400:
        description: prefecture missing
    """
    body = request.get_json(silent=True) or {}
    prefecture = body.get("prefecture")
    if not isinstance(prefecture, str) or not prefecture.strip():
        return jsonify({"error": "prefecture is required"}), 400

    municipality_id = create_municipality(get_store(), prefecture, body.get("prefecture_en"))
    return jsonify({"id": municipality_id}), 201


@app.route("/api/v1/municipalities/<municipality_id>/areas", methods=["GET"])
def api_areas(municipality_id: str):
    """
    Areas owned directly by a municipality
    ---
    tags:
      - Areas
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Areas with their schedules
      404:
        description: Municipality not found
    """
    store = get_store()
    require_municipality(store, municipality_id)
    areas = [{"id": doc.id, **doc.data} for doc in list_areas(store, municipality_id)]
    return jsonify({"areas": areas})


@app.route("/api/v1/municipalities/<municipality_id>", methods=["DELETE"])
def api_delete_municipality(municipality_id: str):
    """
    Delete a municipality document (its areas and cities stay in the store)
    ---
    tags:
      - Municipalities
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Deleted
      404:
        description: Municipality not found
    """
    store = get_store()
    require_municipality(store, municipality_id)
    delete_municipality(store, municipality_id)
    return jsonify({"deleted": municipality_id})


def _area_path(store, municipality_id: str, area_id: str) -> str:
    require_municipality(store, municipality_id)
    area_path = municipality_area_path(municipality_id, area_id)
    require_area(store, area_path)
    return area_path


def _area_record(body: dict) -> AreaRecord:
    record = AreaRecord.model_validate(body)
    if schedule_needs_normalization(record.schedule):
        record.schedule = normalize_schedule_keys(record.schedule)
    return record


@app.route("/api/v1/municipalities/<municipality_id>/areas", methods=["POST"])
def api_create_area(municipality_id: str):
    """
    Add an area to a municipality
    ---
    tags:
      - Areas
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          required:
            - name
          properties:
            name:
              type: string
            name_en:
              type: string
            schedule:
              type: object
              description: month key ("1".."12") -> category -> day numbers
    responses:
      201:
        description: Created area id
      400:
        description: Invalid area
      404:
        description: Municipality not found
    """
    store = get_store()
    require_municipality(store, municipality_id)
    record = _area_record(request.get_json(silent=True) or {})
    area_id = create_area(store, municipality_areas_collection(municipality_id), record)
    return jsonify({"id": area_id}), 201


@app.route("/api/v1/municipalities/<municipality_id>/areas/<area_id>", methods=["PUT"])
def api_update_area(municipality_id: str, area_id: str):
    """
    Replace the name and schedule of an area
    ---
    tags:
      - Areas
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: area_id
        in: path
        type: string
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          required:
            - name
          properties:
            name:
              type: string
            name_en:
              type: string
            schedule:
              type: object
    responses:
      200:
        description: Updated area
      400:
        description: Invalid area
      404:
        description: Municipality or area not found
    """
    store = get_store()
    area_path = _area_path(store, municipality_id, area_id)
    update_area(store, area_path, _area_record(request.get_json(silent=True) or {}))
    return jsonify({"id": area_id, **store.get(area_path)})


@app.route("/api/v1/municipalities/<municipality_id>/areas/<area_id>", methods=["DELETE"])
def api_delete_area(municipality_id: str, area_id: str):
    """
    Delete an area. Its garbage items stay unless items=true is given.
    ---
    tags:
      - Areas
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: area_id
        in: path
        type: string
        required: true
      - name: items
        in: query
        type: boolean
        required: false
        description: Also delete the area's garbage items
    responses:
      200:
        description: Deleted area and the number of deleted items
      404:
        description: Municipality or area not found
    """
    store = get_store()
    area_path = _area_path(store, municipality_id, area_id)
    items_deleted = 0
    if request.args.get("items", "").lower() in ("1", "true", "yes"):
        items_deleted = delete_area_items(store, area_path)
    delete_area(store, area_path)
    return jsonify({"deleted": area_id, "items_deleted": items_deleted})


@app.route("/api/v1/municipalities/<municipality_id>/areas/<area_id>/items", methods=["GET"])
def api_area_items(municipality_id: str, area_id: str):
    """
    Garbage items of an area
    ---
    tags:
      - Garbage Items
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: area_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Items in creation order
      404:
        description: Municipality or area not found
    """
    store = get_store()
    area_path = _area_path(store, municipality_id, area_id)
    items = [{"id": doc.id, **doc.data} for doc in list_area_items(store, area_path)]
    return jsonify({"items": items})


@app.route("/api/v1/municipalities/<municipality_id>/areas/<area_id>/items", methods=["POST"])
def api_create_area_item(municipality_id: str, area_id: str):
    """
    Add a garbage item to an area
    ---
    tags:
      - Garbage Items
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: area_id
        in: path
        type: string
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          required:
            - name_ja
            - category
          properties:
            name_ja:
              type: string
            name_en:
              type: string
            category:
              type: string
            description_ja:
              type: string
            description_en:
              type: string
            examples_ja:
              type: array
              items:
                type: string
            examples_en:
              type: array
              items:
                type: string
    responses:
      201:
        description: Created item id
      400:
        description: Invalid item
      404:
        description: Municipality or area not found
    """
    store = get_store()
    area_path = _area_path(store, municipality_id, area_id)
    item = GarbageItem.model_validate(request.get_json(silent=True) or {})
    item_id = create_area_item(store, area_path, item)
    return jsonify({"id": item_id}), 201


@app.route(
    "/api/v1/municipalities/<municipality_id>/areas/<area_id>/items/<item_id>", methods=["PUT"]
)
def api_update_area_item(municipality_id: str, area_id: str, item_id: str):
    """
    Replace a garbage item of an area
    ---
    tags:
      - Garbage Items
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: area_id
        in: path
        type: string
        required: true
      - name: item_id
        in: path
        type: string
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
    responses:
      200:
        description: Updated item
      400:
        description: Invalid item
      404:
        description: Municipality, area or item not found
    """
    store = get_store()
    item_path = area_item_path(_area_path(store, municipality_id, area_id), item_id)
    item = GarbageItem.model_validate(request.get_json(silent=True) or {})
    update_area_item(store, item_path, item)
    return jsonify({"id": item_id, **store.get(item_path)})


@app.route(
    "/api/v1/municipalities/<municipality_id>/areas/<area_id>/items/<item_id>", methods=["DELETE"]
)
def api_delete_area_item(municipality_id: str, area_id: str, item_id: str):
    """
    Delete a garbage item of an area
    ---
    tags:
      - Garbage Items
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: area_id
        in: path
        type: string
        required: true
      - name: item_id
        in: path
        type: string
        required: true
    responses:
      200:
        description: Deleted
      404:
        description: Municipality, area or item not found
    """
    store = get_store()
    item_path = area_item_path(_area_path(store, municipality_id, area_id), item_id)
    if not delete_area_item(store, item_path):
        return jsonify({"error": f"Garbage item not found: {item_id}"}), 404
    return jsonify({"deleted": item_id})


def _request_text() -> tuple[str, str | None]:
    upload = request.files.get("file")
    if upload is not None:
        return upload.read().decode("utf-8-sig"), upload.filename
    return request.get_data(as_text=True), request.args.get("filename")


@app.route("/api/v1/municipalities/<municipality_id>/import", methods=["POST"])
def api_import(municipality_id: str):
    """
    Import a JSON, CSV or TSV payload into a municipality
    ---
    tags:
      - Import
    consumes:
      - text/plain
      - application/json
      - multipart/form-data
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: filename
        in: query
        type: string
        required: false
        description: Original file name, used to tell JSON from tables
      - name: file
        in: formData
        type: file
        required: false
    responses:
      200:
        description: Counts of written cities, areas and items
      400:
        description: Unrecognized or invalid payload
      404:
        description: Municipality not found
    """
    text, filename = _request_text()
    loaded = load_import_text(text, filename)
    result = import_payload(
        get_store(),
        municipality_id,
        loaded.payload,
        attach_to_existing_areas=loaded.attach_to_existing_areas,
    )
    return jsonify(
        {
            "format": loaded.source_format.value,
            "skipped_rows": loaded.skipped_rows,
            "cities": result.cities,
            "areas": result.areas,
            "items": result.items,
        }
    )


@app.route("/api/v1/municipalities/<municipality_id>/normalize", methods=["POST"])
def api_normalize(municipality_id: str):
    """
    Rewrite legacy "YYYY-MM" schedule keys of every area in place
    ---
    tags:
      - Normalize
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            confirm:
              type: boolean
    responses:
      200:
        description: Normalized and skipped counts
      400:
        description: Confirmation missing
      404:
        description: Municipality not found
    """
    body = request.get_json(silent=True) or {}
    result = normalize_municipality_schedules(
        get_store(), municipality_id, confirmed=body.get("confirm") is True
    )
    return jsonify({"normalized": result.normalized, "skipped": result.skipped})


@app.route("/api/v1/municipalities/<municipality_id>/extract", methods=["POST"])
def api_extract(municipality_id: str):
    """
    Extract a draft from a PDF (or its text) for review; nothing is saved
    ---
    tags:
      - Extraction
    consumes:
      - multipart/form-data
      - application/json
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: file
        in: formData
        type: file
        required: false
    responses:
      200:
        description: Draft with areas and garbageItems
      404:
        description: Municipality not found
      500:
        description: No AI provider configured
    """
    municipality = require_municipality(get_store(), municipality_id)
    try:
        config.validate_config()
    except RuntimeError as e:
        return jsonify({"error": str(e)}), 500

    upload = request.files.get("file")
    if upload is not None:
        text = _uploaded_pdf_text(upload)
    else:
        text = (request.get_json(silent=True) or {}).get("text") or ""
    if not text.strip():
        return jsonify({"error": "No text to extract from"}), 400

    draft = extract_garbage_data(text, municipality.get("prefecture", ""))
    return jsonify(draft.model_dump(mode="json"))


def _uploaded_pdf_text(upload) -> str:
    if not (upload.filename or "").lower().endswith(".pdf"):
        return upload.read().decode("utf-8")

    with tempfile.TemporaryDirectory() as tmp_dir:
        pdf_path = Path(tmp_dir) / "upload.pdf"
        upload.save(pdf_path)
        return read_pdf_text(pdf_path)


@app.route("/api/v1/municipalities/<municipality_id>/extraction-draft", methods=["POST"])
def api_save_draft(municipality_id: str):
    """
    Save a reviewed extraction draft
    ---
    tags:
      - Extraction
    parameters:
      - name: municipality_id
        in: path
        type: string
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            areas:
              type: array
              items:
                type: object
            garbageItems:
              type: array
              items:
                type: object
    responses:
      200:
        description: Saved and skipped counts
      400:
        description: Invalid draft
      404:
        description: Municipality not found
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return jsonify({"error": "Draft must be a JSON object"}), 400
    try:
        draft = ExtractedData.model_validate(body, context={"strict": True})
    except ValidationError as e:
        return jsonify({"error": f"Invalid draft: {e}"}), 400

    result = save_extraction_draft(get_store(), municipality_id, draft)
    return jsonify(
        {
            "areas": result.areas,
            "items": result.items,
            "skipped_areas": result.skipped_areas,
            "skipped_items": result.skipped_items,
        }
    )


if __name__ == "__main__":
    logger.info("Starting API server on %s:%s", config.API_HOST, config.API_PORT)
    app.run(host=config.API_HOST, port=config.API_PORT, debug=config.DEBUG)
