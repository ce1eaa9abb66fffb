# Structured replies expected from the LLM function calls, one model per question kind
# quizcards/models/llm_replies.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from quizcards.models.enums import QuestionType

class ReplyItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # 1-based position of the track in its batch; absent in single-track replies
    index: Optional[int] = None

class TriviaReplyItem(ReplyItem):
    question: str
    correct_answer: str = Field(alias="correctAnswer")
    wrong_answers: List[str] = Field(alias="wrongAnswers")

class ArtistReplyItem(ReplyItem):
    wrong_artists: List[str] = Field(alias="wrongArtists")

class MissingWordReplyItem(ReplyItem):
    blanked_title: str = Field(alias="blankedTitle")
    missing_word: str = Field(alias="missingWord")
    wrong_words: List[str] = Field(alias="wrongWords")

class TitleReplyItem(ReplyItem):
    wrong_titles: List[str] = Field(alias="wrongTitles")

class WrongOptionsReply(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    wrong_options: List[str] = Field(alias="wrongOptions")

REPLY_MODELS = {
    QuestionType.TRIVIA: TriviaReplyItem,
    QuestionType.ARTIST: ArtistReplyItem,
    QuestionType.MISSING_WORD: MissingWordReplyItem,
    QuestionType.TITLE: TitleReplyItem,
}
