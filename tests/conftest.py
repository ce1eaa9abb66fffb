# tests/conftest.py
import json
import logging
import random
from typing import List, Optional, Union

import pytest

from quizcards.models.enums import QuestionType
from quizcards.models.track import Track, TrackRow
from quizcards.services.quiz_generator import QuizGenerator
from quizcards.services.quiz_helper import QuizHelper
from quizcards.services.translation import Translation
from quizcards.utils.config import Settings

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

Reply = Union[str, None, Exception]


class FakeLLM:
    """
    Scripted stand-in for the function-calling client. Each call pops the next
    reply: a raw argument string, None (no function call) or an exception to raise.
    Once the script is exhausted, `default` is returned.
    """

    def __init__(self, replies: Optional[List[Reply]] = None, default: Reply = None):
        self.replies = list(replies or [])
        self.default = default
        self.calls = []

    async def call_function(self, system: str, user: str, function: dict) -> Optional[str]:
        self.calls.append({"system": system, "user": user, "function": function})
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        return reply

    def calls_for(self, function_name: str) -> list:
        return [call for call in self.calls if call["function"]["name"] == function_name]


def make_track(track_id: int, question_type: QuestionType = QuestionType.TRIVIA, name: Optional[str] = None,
               artist: Optional[str] = None, year: int = 1980) -> Track:
    return Track(
        track_id=track_id,
        name=name or f"Song Number {track_id}",
        artist=artist or f"Artist {track_id}",
        year=year,
        type=question_type,
    )


def make_tracks(count: int, question_type: QuestionType, start: int = 1) -> List[Track]:
    return [make_track(i, question_type) for i in range(start, start + count)]


def trivia_reply(batch: List[Track]) -> str:
    return json.dumps({"questions": [
        {
            "index": i,
            "question": f"Which instrument opens {track.name}?",
            "correctAnswer": "Piano",
            "wrongAnswers": ["Guitar", "Drums", "Violin"],
        }
        for i, track in enumerate(batch, start=1)
    ]})


def artist_reply(batch: List[Track]) -> str:
    return json.dumps({"questions": [
        {"index": i, "wrongArtists": [f"Other {i}a", f"Other {i}b", f"Other {i}c"]}
        for i in range(1, len(batch) + 1)
    ]})


def title_reply(batch: List[Track]) -> str:
    return json.dumps({"questions": [
        {"index": i, "wrongTitles": [f"Fake Title {i}a", f"Fake Title {i}b", f"Fake Title {i}c"]}
        for i in range(1, len(batch) + 1)
    ]})


def missing_word_reply(batch: List[Track]) -> str:
    # make_track titles are "Song Number <id>"
    return json.dumps({"questions": [
        {
            "index": i,
            "blankedTitle": f"___ Number {track.track_id}",
            "missingWord": "Song",
            "wrongWords": ["Dance", "Story", "Dream"],
        }
        for i, track in enumerate(batch, start=1)
    ]})


def assert_valid_multiple_choice(question) -> None:
    assert question.options is not None
    assert len(question.options) == 4
    assert question.options.count(question.correct_answer) == 1
    assert len({opt.casefold() for opt in question.options}) == 4


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def translate():
    return Translation()


@pytest.fixture
def test_settings():
    return Settings(llm_provider="openai", openai_api_key="sk-test", quiz_batch_size=10, default_locale="en")


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def generator(fake_llm, translate, test_settings, rng):
    return QuizGenerator(llm=fake_llm, translate=translate, config=test_settings, rng=rng)


@pytest.fixture
def helper(translate, rng):
    return QuizHelper(translate=translate, rng=rng)


@pytest.fixture
def playlist_rows():
    return [
        TrackRow(id=1, track_id="ISRC001", name="Imagine", artist="John Lennon", year=1971, track_order=0),
        TrackRow(id=2, track_id="ISRC002", name="Billie Jean", artist="Michael Jackson", year=1982, track_order=1),
        TrackRow(id=3, track_id="ISRC003", name="Smells Like Teen Spirit", artist="Nirvana", year=1991, track_order=2),
        TrackRow(id=4, track_id="ISRC004", name="Rolling in the Deep", artist="Adele", year=2010, track_order=3),
        TrackRow(id=5, track_id="ISRC005", name="Hey Jude", artist="The Beatles", year=1968, track_order=4),
        TrackRow(id=6, track_id="ISRC006", name="Dancing Queen", artist="ABBA", year=1976, track_order=5),
        TrackRow(id=7, track_id="ISRC007", name="Bohemian Rhapsody", artist="Queen", year=1975, track_order=6),
        TrackRow(id=8, track_id="ISRC008", name="Like a Rolling Stone", artist="Bob Dylan", year=None, track_order=7),
    ]
