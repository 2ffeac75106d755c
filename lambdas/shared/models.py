"""Pydantic models for LW roster records."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

# Stats are stored as unsigned bytes; nothing above that range is checked.
U8 = Annotated[int, Field(ge=0, le=255)]

TEXT_FIELDS = ("name", "subclass", "description")


class Character(BaseModel):
    """A single roster entry.

    Field order matches the JSON document layout and is preserved on output.
    Validation is strict: no coercion between strings, numbers and booleans.
    """

    model_config = ConfigDict(strict=True)

    name: str = Field(..., min_length=1)
    health: U8
    subclass: str
    description: str
    attack: U8
    defense: U8
    will: U8
    speed: U8
    is_flying: bool
    companions: list["Character"] | None = None
    attacks: list[str]

    @model_validator(mode="before")
    @classmethod
    def drop_companions_when_disabled(cls, data: Any, info: ValidationInfo) -> Any:
        """Ignore the companions key for rosters without that capability."""
        context = info.context or {}
        if isinstance(data, dict) and not context.get("companions", True):
            return {k: v for k, v in data.items() if k != "companions"}
        return data

    @property
    def companion_count(self) -> int:
        """Number of direct companions (0 when absent)."""
        return len(self.companions) if self.companions else 0
