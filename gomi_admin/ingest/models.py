"""
Import payload shapes and the canonical records written to the store.

JSON input comes in two generations, modelled as a tagged union:
- new: municipalities -> cities -> areas, plus an optional global item list
- old: flat areas (legacy monthlySchedules) plus a global item list
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from gomi_admin.ingest.categories import Category

MonthlySchedule = dict[str, list[int]]
Schedule = dict[str, MonthlySchedule]

CityType = Literal["city", "ward", "town", "village"]


class MonthEntry(BaseModel):
    month: str
    schedule: MonthlySchedule = Field(default_factory=dict)

    @field_validator("month", mode="before")
    @classmethod
    def _month_as_str(cls, value):
        return str(value) if isinstance(value, int) else value


class AreaPayload(BaseModel):
    id: str | int | None = None
    name: str
    name_en: str | None = None
    schedule: Schedule | None = None
    monthlySchedules: list[MonthEntry] | None = None


class CityPayload(BaseModel):
    id: str | int | None = None
    name: str
    name_en: str | None = None
    type: CityType | None = None
    areas: list[AreaPayload] = Field(default_factory=list)


class MunicipalityPayload(BaseModel):
    id: str | int | None = None
    prefecture: str
    prefecture_en: str | None = None
    cities: list[CityPayload] = Field(default_factory=list)


class ItemPayload(BaseModel):
    """Garbage item as it appears in import files (bilingual or legacy single-language)."""

    category: Category
    name: str | None = None
    name_ja: str | None = None
    name_en: str | None = None
    description: str | None = None
    description_ja: str | None = None
    description_en: str | None = None
    examples: list[str] | None = None
    examples_ja: list[str] | None = None
    examples_en: list[str] | None = None

    @model_validator(mode="after")
    def _require_japanese_name(self):
        if not (self.name_ja or self.name):
            raise ValueError("garbage item needs name_ja (or legacy name)")
        return self


class NewFormatPayload(BaseModel):
    format: Literal["new"] = "new"
    municipalities: list[MunicipalityPayload]
    garbageItems: list[ItemPayload] = Field(default_factory=list)


class OldFormatPayload(BaseModel):
    format: Literal["old"] = "old"
    areas: list[AreaPayload] = Field(default_factory=list)
    garbageItems: list[ItemPayload] = Field(default_factory=list)


ImportPayload = Annotated[
    Union[NewFormatPayload, OldFormatPayload], Field(discriminator="format")
]


class GarbageItem(BaseModel):
    """Canonical item record. English fields are always present (empty when unknown)."""

    name_ja: str
    name_en: str = ""
    category: Category
    description_ja: str = ""
    description_en: str = ""
    examples_ja: list[str] = Field(default_factory=list)
    examples_en: list[str] = Field(default_factory=list)

    def to_document(self) -> dict:
        return self.model_dump(mode="json")


class AreaRecord(BaseModel):
    name: str
    name_en: str = ""
    schedule: Schedule = Field(default_factory=dict)

    def to_document(self) -> dict:
        return self.model_dump(mode="json")
