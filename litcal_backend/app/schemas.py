# schemas.py  (temporale events, write results)

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictStr, conint


# ===================== Enums =====================

class LitColor(str, Enum):
    GREEN = "green"
    PURPLE = "purple"
    WHITE = "white"
    RED = "red"
    ROSE = "rose"

class LitGrade(int, Enum):
    WEEKDAY = 0            # ferial, never stored in the core list
    COMMEMORATION = 1
    MEMORIAL_OPT = 2
    MEMORIAL = 3
    FEAST = 4
    FEAST_LORD = 5
    SOLEMNITY = 6
    HIGHER_SOLEMNITY = 7

EventType = Literal["mobile", "fixed"]

GradeInt = conint(strict=True, ge=LitGrade.WEEKDAY.value, le=LitGrade.HIGHER_SOLEMNITY.value)


# ===================== Events =====================

class TemporaleEvent(BaseModel):
    """
    Core record as stored in the temporale file. Extra keys are kept so a
    payload's own fields survive the round trip; `i18n` and `readings` are
    split off before storage.
    """
    model_config = ConfigDict(extra="allow")

    event_key: StrictStr = Field(min_length=1)
    grade: GradeInt  # type: ignore[valid-type]
    type: EventType
    color: List[LitColor]

    @property
    def is_ferial(self) -> bool:
        return self.grade == LitGrade.WEEKDAY


# ===================== Responses =====================

class TemporaleOut(BaseModel):
    events: List[Dict[str, Any]]
    locale: str

class PutResult(BaseModel):
    success: bool = True
    message: str = "Temporale data created successfully"
    events: int
    ferial_events: int

class PatchResult(BaseModel):
    success: bool = True
    message: str = "Temporale data updated successfully"
    updated: int
    added: int
    ferial_updated: int

class DeleteResult(BaseModel):
    success: bool = True
    message: str
    event_key: str
    type: Optional[Literal["ferial"]] = None
