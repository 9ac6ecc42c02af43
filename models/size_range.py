from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SizeRange(BaseModel):
    """Employee-count range. ``max`` of None means no upper limit."""

    min: int = Field(default=0, ge=0)
    max: int | None = Field(default=None, ge=0)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> "SizeRange":
        if self.max is not None and self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self

    @property
    def unbounded(self) -> bool:
        return self.max is None

    def contains(self, value: int) -> bool:
        if value < self.min:
            return False
        return self.max is None or value <= self.max
