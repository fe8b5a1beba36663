"""
Shared infrastructure used by the importer, extraction and API services.
"""
