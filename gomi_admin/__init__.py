"""
Garbage schedule admin - ingestion, normalization and extraction for collection schedules

Structure:
- common/     - DB connection, document store, migrations, logging
- ingest/     - Format detection, CSV parsing, schedule shape conversion
- importer/   - Writes canonical payloads to the store, bulk normalization
- extraction/ - PDF text -> LLM extraction -> merged draft
- api/        - Flask admin API
- cli.py      - gomi-admin command line
"""
