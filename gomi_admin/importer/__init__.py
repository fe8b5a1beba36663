"""
Importer modules - store writes for payloads and schedule normalization
"""

from gomi_admin.importer.normalizer import (
    ConfirmationRequiredError,
    NormalizeResult,
    normalize_municipality_schedules,
)
from gomi_admin.importer.repository import MunicipalityNotFoundError
from gomi_admin.importer.writer import (
    ImportProgress,
    ImportResult,
    import_new_format,
    import_old_format,
    import_payload,
)

__all__ = [
    "ConfirmationRequiredError",
    "NormalizeResult",
    "normalize_municipality_schedules",
    "MunicipalityNotFoundError",
    "ImportProgress",
    "ImportResult",
    "import_new_format",
    "import_old_format",
    "import_payload",
]
