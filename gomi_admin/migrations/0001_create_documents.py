"""
Document store: one row per document, addressed by its slash-separated path.
"""

from yoyo import step

steps = [
    step(
        """
        CREATE TABLE IF NOT EXISTS documents (
            path TEXT PRIMARY KEY,
            collection TEXT NOT NULL,
            doc_id TEXT NOT NULL,
            data TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        """,
        "DROP TABLE IF EXISTS documents",
    ),
    step(
        "CREATE INDEX IF NOT EXISTS idx_documents_collection ON documents(collection)",
        "DROP INDEX IF EXISTS idx_documents_collection",
    ),
]
