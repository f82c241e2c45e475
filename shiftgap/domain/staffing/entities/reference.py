"""
Reference data read by the gap engine.

Rows come back from the org-scoped data client; none of them are mutated by
the engine.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ReferenceModel(BaseModel):
    """Immutable row model accepting both snake_case and camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ShiftRule(ReferenceModel):
    """Clock boundaries and break policy of one shift type for one org."""

    shift_start: str
    shift_end: str
    break_minutes: int = 0
    paid_break_minutes: int = 0

    @field_validator("break_minutes", "paid_break_minutes", mode="before")
    @classmethod
    def _null_as_zero(cls, v: object) -> object:
        return 0 if v is None else v


class Station(ReferenceModel):
    id: str
    name: str = ""
    code: str | None = None
    line: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _null_name(cls, v: object) -> object:
        return "" if v is None else v


class StationRoleRequirement(ReferenceModel):
    station_id: str
    skill_id: str
    required_level: int = 0
    is_mandatory: bool = False

    @field_validator("required_level", "is_mandatory", mode="before")
    @classmethod
    def _null_as_falsy(cls, v: object, info) -> object:
        if v is None:
            return 0 if info.field_name == "required_level" else False
        return v


class Competence(ReferenceModel):
    id: str
    name: str
    code: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def _null_code(cls, v: object) -> object:
        return "" if v is None else v


class RequirementDetail(ReferenceModel):
    """A station requirement joined with its competence display data."""

    skill_id: str
    skill_name: str = Field(default="Unknown")
    skill_code: str = ""
    required_level: int = 0
    is_mandatory: bool = False
