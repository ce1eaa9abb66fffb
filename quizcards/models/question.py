# Data models for generated quiz questions
# quizcards/models/question.py
from pydantic import BaseModel, ConfigDict
from typing import List, Optional, Union

class ReleaseOrderOption(BaseModel):
    label: str
    year: int

class QuestionContent(BaseModel):
    """The editable part of a question, as returned by regeneration."""
    model_config = ConfigDict(frozen=True)

    question: str
    options: Optional[Union[List[str], List[ReleaseOrderOption]]] = None  # None for free-form answers
    correct_answer: str

class GeneratedQuestion(QuestionContent):
    track_id: int
    type: str

    def content(self) -> QuestionContent:
        return QuestionContent(
            question=self.question,
            options=self.options,
            correct_answer=self.correct_answer,
        )

class ProgressEvent(BaseModel):
    step: str
    detail: str  # Translation key describing the step
    questions_generated: int
