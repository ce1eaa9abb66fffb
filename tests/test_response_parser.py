# tests/test_response_parser.py
import json

import pytest

from conftest import assert_valid_multiple_choice, make_track, make_tracks, trivia_reply
from quizcards.models.enums import QuestionType
from quizcards.services.response_parser import (
    blank_title,
    parse_batch_reply,
    parse_function_arguments,
    parse_single_reply,
    parse_wrong_options,
)


@pytest.mark.parser
@pytest.mark.parametrize("raw", [None, "", "not json at all", "[1, 2, 3]", '"just a string"', '{"questions": ['])
def test_unusable_arguments_parse_to_none(raw):
    assert parse_function_arguments(raw) is None


@pytest.mark.parser
def test_valid_trivia_batch(translate, rng):
    batch = make_tracks(3, QuestionType.TRIVIA)
    questions = parse_batch_reply(QuestionType.TRIVIA, trivia_reply(batch), batch, "en", translate, rng)

    assert [q.track_id for q in questions] == [1, 2, 3]
    for question in questions:
        assert question.type == "trivia"
        assert question.correct_answer == "Piano"
        assert_valid_multiple_choice(question)


@pytest.mark.parser
@pytest.mark.parametrize("raw", [None, "{oops", json.dumps({"items": []}), json.dumps({"questions": "nope"})])
def test_malformed_batch_yields_no_questions(raw, translate, rng):
    batch = make_tracks(2, QuestionType.TRIVIA)
    assert parse_batch_reply(QuestionType.TRIVIA, raw, batch, "en", translate, rng) == []


@pytest.mark.parser
def test_out_of_range_and_duplicate_indexes_are_skipped(translate, rng):
    batch = make_tracks(2, QuestionType.ARTIST)
    raw = json.dumps({"questions": [
        {"index": 0, "wrongArtists": ["A", "B", "C"]},
        {"index": 3, "wrongArtists": ["A", "B", "C"]},
        {"index": 2, "wrongArtists": ["A", "B", "C"]},
        {"index": 2, "wrongArtists": ["D", "E", "F"]},
    ]})
    questions = parse_batch_reply(QuestionType.ARTIST, raw, batch, "en", translate, rng)

    assert len(questions) == 1
    assert questions[0].track_id == 2
    assert questions[0].correct_answer == "Artist 2"
    assert set(questions[0].options) == {"Artist 2", "A", "B", "C"}


@pytest.mark.parser
def test_items_failing_validation_are_skipped(translate, rng):
    batch = make_tracks(3, QuestionType.TITLE)
    raw = json.dumps({"questions": [
        {"index": 1},
        "garbage",
        {"index": 3, "wrongTitles": ["X", "Y", "Z"]},
    ]})
    questions = parse_batch_reply(QuestionType.TITLE, raw, batch, "en", translate, rng)

    assert [q.track_id for q in questions] == [3]
    assert questions[0].question == translate.translate("quiz.titleQuestion", "en")
    assert questions[0].correct_answer == "Song Number 3"


@pytest.mark.parser
def test_item_with_too_few_distinct_distractors_is_dropped(translate, rng):
    batch = make_tracks(2, QuestionType.TRIVIA)
    raw = json.dumps({"questions": [
        {"index": 1, "question": "Q1?", "correctAnswer": "Piano", "wrongAnswers": ["piano", "Guitar", "Drums"]},
        {"index": 2, "question": "Q2?", "correctAnswer": "Piano", "wrongAnswers": ["Guitar", "Drums", "Violin", "Bass"]},
    ]})
    questions = parse_batch_reply(QuestionType.TRIVIA, raw, batch, "en", translate, rng)

    assert [q.track_id for q in questions] == [2]
    assert_valid_multiple_choice(questions[0])
    assert "Bass" not in questions[0].options


@pytest.mark.parser
def test_missing_word_question_uses_blanked_title(translate, rng):
    track = make_track(1, QuestionType.MISSING_WORD, name="Smells Like Teen Spirit")
    raw = json.dumps({"questions": [{
        "index": 1,
        "blankedTitle": "Smells Like Teen ___",
        "missingWord": "Spirit",
        "wrongWords": ["Angst", "Dream", "Rebel"],
    }]})
    [question] = parse_batch_reply(QuestionType.MISSING_WORD, raw, [track], "nl", translate, rng)

    assert question.question == "Smells Like Teen ___\nWelk woord ontbreekt in de titel?"
    assert question.correct_answer == "Spirit"
    assert_valid_multiple_choice(question)


@pytest.mark.parser
def test_missing_word_not_in_title_is_rejected(translate, rng):
    track = make_track(1, QuestionType.MISSING_WORD, name="Smells Like Teen Spirit")
    raw = json.dumps({"questions": [{
        "index": 1,
        "blankedTitle": "Smells Like ___ Spirit",
        "missingWord": "Youth",
        "wrongWords": ["Angst", "Dream", "Rebel"],
    }]})
    assert parse_batch_reply(QuestionType.MISSING_WORD, raw, [track], "en", translate, rng) == []


@pytest.mark.parser
@pytest.mark.parametrize("title,word,template,expected", [
    ("Hey Jude", "Jude", "Hey ___", "Hey ___"),
    ("Hey Jude", "Jude", "", "Hey ___"),
    ("Hey Jude", "jude", "___ ___", "Hey ___"),
    ("Don't Stop Me Now", "Now", "Don't Stop Me Now", "Don't Stop Me ___"),
    ("Help!", "Help", "", "___"),
    ("Hey Jude", "Judy", "Hey ___", None),
    ("Hey Jude", "Jude", "___ Jude", "Hey ___"),
    ("Hey Jude", "Jude", "Hey ____", "Hey ___"),
    ("Help!", "Help", "___!", "___!"),
])
def test_blank_title(title, word, template, expected):
    assert blank_title(title, word, template) == expected


@pytest.mark.parser
def test_single_reply(translate, rng):
    track = make_track(5, QuestionType.ARTIST, artist="Queen")
    raw = json.dumps({"wrongArtists": ["Queen", "Kansas", "Styx", "Boston"]})
    question = parse_single_reply(QuestionType.ARTIST, raw, track, "en", translate, rng)

    assert question.correct_answer == "Queen"
    assert set(question.options) == {"Queen", "Kansas", "Styx", "Boston"}


@pytest.mark.parser
def test_single_reply_invalid_is_none(translate, rng):
    track = make_track(5, QuestionType.TRIVIA)
    assert parse_single_reply(QuestionType.TRIVIA, json.dumps({"question": "Q?"}), track, "en", translate, rng) is None
    assert parse_single_reply(QuestionType.TRIVIA, "no json", track, "en", translate, rng) is None


@pytest.mark.parser
def test_parse_wrong_options():
    raw = json.dumps({"wrongOptions": ["Phil Spector", "Quincy Jones", "quincy jones", "George Martin", "Rick Rubin"]})
    assert parse_wrong_options(raw, "Phil Spector") == ["Quincy Jones", "George Martin", "Rick Rubin"]
    assert parse_wrong_options("{", "Phil Spector") == []
    assert parse_wrong_options(json.dumps({"options": []}), "Phil Spector") == []


@pytest.mark.parser
def test_missing_word_template_blanking_another_word_is_rebuilt(translate, rng):
    track = make_track(1, QuestionType.MISSING_WORD, name="Smells Like Teen Spirit")
    raw = json.dumps({"questions": [{
        "index": 1,
        "blankedTitle": "___ Like Teen Spirit",
        "missingWord": "Teen",
        "wrongWords": ["Angst", "Dream", "Rebel"],
    }]})
    [question] = parse_batch_reply(QuestionType.MISSING_WORD, raw, [track], "en", translate, rng)

    blanked = question.question.split("\n")[0]
    assert blanked == "Smells Like ___ Spirit"
    assert question.correct_answer == "Teen"
    assert blanked.replace("___", question.correct_answer) == track.name
