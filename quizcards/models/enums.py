# quizcards/models/enums.py
from enum import Enum

class QuestionType(str, Enum):
    """The question styles a track can be tagged with."""
    YEAR = "year"
    TRIVIA = "trivia"
    ARTIST = "artist"
    MISSING_WORD = "missing_word"
    TITLE = "title"
    RELEASE_ORDER = "release_order"
    DECADE = "decade"

# Order in which the AI pipeline walks the question types.
AI_QUESTION_TYPES = (
    QuestionType.YEAR,
    QuestionType.TRIVIA,
    QuestionType.ARTIST,
    QuestionType.MISSING_WORD,
    QuestionType.TITLE,
)

NON_AI_QUESTION_TYPES = (
    QuestionType.RELEASE_ORDER,
    QuestionType.DECADE,
)

class GenerationStatus(str, Enum):
    """Lifecycle of a tracked quiz generation."""
    GENERATING = "generating"
    COMPLETE = "complete"
    ERROR = "error"
