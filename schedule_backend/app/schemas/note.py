from __future__ import annotations

import enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class NoteType(str, enum.Enum):
    """Categories a coach can tag a calendar memo with."""

    WORK = "work"
    NO_SHOW = "noShow"
    MAKEUP_CLASS = "makeupClass"
    SPECIAL_NOTE = "specialNote"


NOTE_TYPE_NAMES: Dict[NoteType, str] = {
    NoteType.WORK: "업무",
    NoteType.NO_SHOW: "노쇼",
    NoteType.MAKEUP_CLASS: "보강",
    NoteType.SPECIAL_NOTE: "특이사항",
}


class DailyNote(BaseModel):
    id: str
    type: NoteType = NoteType.WORK
    memo: str


class NoteCreate(BaseModel):
    type: NoteType = NoteType.WORK
    memo: str = Field("", max_length=2000)


class NoteUpdate(BaseModel):
    type: Optional[NoteType] = None
    memo: Optional[str] = Field(default=None, max_length=2000)


class DayNotesResponse(BaseModel):
    date_key: str
    items: List[DailyNote] = Field(default_factory=list)
