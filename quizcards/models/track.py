# Data models for playlist tracks fed into quiz generation
# quizcards/models/track.py
from pydantic import BaseModel, ConfigDict
from typing import Optional

from quizcards.models.enums import QuestionType

class Track(BaseModel):
    """A song tagged with the question style to generate for it."""
    model_config = ConfigDict(frozen=True)

    track_id: int
    name: str
    artist: str
    year: int
    type: QuestionType

class TrackRow(BaseModel):
    """A playlist row as loaded from storage, before a question type is assigned."""
    id: int
    track_id: str  # Provider id / ISRC used for track selection
    name: str
    artist: str
    year: Optional[int] = None
    track_order: int = 0
