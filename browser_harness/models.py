"""Typed option models for launching browsers and evaluating assertions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LaunchOptions(BaseModel):
    """Options passed to ``BrowserType.launch``; unknown keys pass through."""

    model_config = ConfigDict(extra="allow")

    executable_path: Optional[str] = None
    headless: bool = True

    @field_validator("executable_path")
    @classmethod
    def _blank_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    def to_launch_kwargs(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class EvalExpectation(BaseModel):
    """Arguments and expected result of an in-page evaluation assertion."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    args: List[Any] = Field(default_factory=list)
    expected: Any = None

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: Any) -> List[Any]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]
