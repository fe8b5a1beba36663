"""
Shapes of the data returned by the extraction model.

Validation is lenient: unknown keys are ignored, areas and items are validated
one by one and invalid entries are dropped with a warning, so one bad entry
never costs the rest of the chunk. Reviewed drafts are validated with
context={"strict": True}, which rejects invalid entries instead. Empty day
lists and unknown category keys are removed from schedules; item categories
stay plain strings until the draft is saved.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from gomi_admin.ingest.categories import CATEGORY_KEYS
from gomi_admin.ingest.models import Schedule

logger = logging.getLogger(__name__)


class ExtractedArea(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    schedule: Schedule = Field(default_factory=dict)

    @field_validator("schedule", mode="before")
    @classmethod
    def _drop_empty_months(cls, value):
        if not isinstance(value, dict):
            return {}
        cleaned = {}
        for month, month_schedule in value.items():
            if not isinstance(month_schedule, dict):
                continue
            categories = {
                category: days
                for category, days in month_schedule.items()
                if category in CATEGORY_KEYS and isinstance(days, list) and days
            }
            if categories:
                cleaned[str(month)] = categories
        return cleaned


class ExtractedItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    category: str
    description: str = ""
    examples: list[str] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return value or ""

    @field_validator("examples", mode="before")
    @classmethod
    def _examples_list(cls, value):
        return value or []


def _valid_entries(model: type[BaseModel], value, label: str, info: ValidationInfo):
    if info.context and info.context.get("strict"):
        return value
    if not isinstance(value, list):
        if value is not None:
            logger.warning("Extraction %s is not a list, ignored", label)
        return []
    entries = []
    for index, entry in enumerate(value):
        if isinstance(entry, model):
            entries.append(entry)
            continue
        try:
            entries.append(model.model_validate(entry))
        except ValidationError as e:
            logger.warning(
                "Dropped invalid %s entry %s: %s",
                label,
                index,
                "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()),
            )
    return entries


class ExtractedData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    areas: list[ExtractedArea] = Field(default_factory=list)
    garbageItems: list[ExtractedItem] = Field(default_factory=list)

    @field_validator("areas", mode="before")
    @classmethod
    def _valid_areas(cls, value, info: ValidationInfo):
        return _valid_entries(ExtractedArea, value, "area", info)

    @field_validator("garbageItems", mode="before")
    @classmethod
    def _valid_items(cls, value, info: ValidationInfo):
        return _valid_entries(ExtractedItem, value, "item", info)

    def is_empty(self) -> bool:
        return not self.areas and not self.garbageItems
