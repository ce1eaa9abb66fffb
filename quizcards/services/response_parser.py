# Turns structured LLM replies into quiz questions; malformed replies become zero questions, never errors
# quizcards/services/response_parser.py
import json
import random
import re
from typing import List, Optional, Sequence

from pydantic import ValidationError

from quizcards.models.enums import QuestionType
from quizcards.models.llm_replies import (
    REPLY_MODELS,
    ArtistReplyItem,
    MissingWordReplyItem,
    ReplyItem,
    TitleReplyItem,
    TriviaReplyItem,
    WrongOptionsReply,
)
from quizcards.models.question import GeneratedQuestion
from quizcards.models.track import Track
from quizcards.services.shuffle import MAX_OPTIONS, build_options, dedupe_distractors
from quizcards.services.translation import Translate
from quizcards.utils.logger import logger

BLANK = "___"
REQUIRED_DISTRACTORS = MAX_OPTIONS - 1

_WORD_EDGE_RE = re.compile(r"^\W+|\W+$")
_UNDERSCORE_RUN_RE = re.compile(r"_+")


def parse_function_arguments(raw: Optional[str]) -> Optional[dict]:
    """Decodes the argument string of a function call. Returns None if it is missing or not a JSON object."""
    if raw is None:
        logger.warning("No function call arguments in LLM reply")
        return None
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Could not parse function call arguments as JSON: {e}. Raw: {str(raw)[:200]}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Function call arguments are not a JSON object: {str(raw)[:200]}")
        return None
    return data


def _normalize_word(word: str) -> str:
    return _WORD_EDGE_RE.sub("", word).casefold()


def blank_title(title: str, missing_word: str, blanked_title: str = "") -> Optional[str]:
    """
    Returns the title with the missing word replaced by ___.

    The model's own template is used when it holds exactly one blank and
    filling that blank with the word gives back the title; otherwise the
    first matching word of the title is blanked. Returns None when the
    word does not occur in the title.
    """
    missing = _normalize_word(missing_word)
    if not missing or missing not in title.casefold():
        return None

    template = (blanked_title or "").strip()
    if _UNDERSCORE_RUN_RE.findall(template) == [BLANK]:
        filled = template.replace(BLANK, missing_word.strip())
        if filled.casefold() == title.strip().casefold():
            return template
        logger.debug(f"Blanked title '{template}' does not blank '{missing_word}' in '{title}'")

    words = title.split()
    for i, word in enumerate(words):
        if _normalize_word(word) == missing:
            words[i] = BLANK
            return " ".join(words)
    return None


def build_question(
    question_type: QuestionType,
    track: Track,
    item: ReplyItem,
    locale: str,
    translate: Translate,
    rng: Optional[random.Random] = None,
) -> Optional[GeneratedQuestion]:
    """Builds one multiple-choice question from a validated reply item, or None if the item is unusable."""
    question_type = QuestionType(question_type)

    if question_type == QuestionType.TRIVIA and isinstance(item, TriviaReplyItem):
        correct_answer = item.correct_answer.strip()
        question = item.question.strip()
        candidates = item.wrong_answers
        if not question or not correct_answer:
            logger.warning(f"Empty trivia question or answer for track {track.track_id}")
            return None
    elif question_type == QuestionType.ARTIST and isinstance(item, ArtistReplyItem):
        correct_answer = track.artist
        question = translate("quiz.artistQuestion", locale)
        candidates = item.wrong_artists
    elif question_type == QuestionType.TITLE and isinstance(item, TitleReplyItem):
        correct_answer = track.name
        question = translate("quiz.titleQuestion", locale)
        candidates = item.wrong_titles
    elif question_type == QuestionType.MISSING_WORD and isinstance(item, MissingWordReplyItem):
        correct_answer = _WORD_EDGE_RE.sub("", item.missing_word.strip()) or item.missing_word.strip()
        blanked = blank_title(track.name, correct_answer, item.blanked_title)
        if blanked is None:
            logger.warning(f"Missing word '{item.missing_word}' does not occur in title '{track.name}' (track {track.track_id})")
            return None
        question = f"{blanked}\n{translate('quiz.missingWordQuestion', locale)}"
        candidates = item.wrong_words
    else:
        raise TypeError(f"{type(item).__name__} does not match question type '{question_type.value}'")

    distractors = dedupe_distractors(correct_answer, candidates)
    if len(distractors) < REQUIRED_DISTRACTORS:
        logger.warning(
            f"Only {len(distractors)} distinct wrong options for {question_type.value} question on track {track.track_id}, skipping"
        )
        return None

    return GeneratedQuestion(
        track_id=track.track_id,
        type=question_type.value,
        question=question,
        options=build_options(correct_answer, distractors, rng),
        correct_answer=correct_answer,
    )


def parse_batch_reply(
    question_type: QuestionType,
    raw: Optional[str],
    batch: Sequence[Track],
    locale: str,
    translate: Translate,
    rng: Optional[random.Random] = None,
) -> List[GeneratedQuestion]:
    """Maps every reply item back to its track by 1-based index. Unusable items are logged and dropped."""
    question_type = QuestionType(question_type)
    data = parse_function_arguments(raw)
    if data is None:
        return []

    entries = data.get("questions")
    if not isinstance(entries, list):
        logger.warning(f"Reply for {question_type.value} batch has no 'questions' list")
        return []

    model = REPLY_MODELS[question_type]
    questions: List[GeneratedQuestion] = []
    used_indexes = set()

    for entry in entries:
        try:
            item = model.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping invalid {question_type.value} reply item: {e.error_count()} validation error(s)")
            continue

        index = item.index
        if index is None or not 1 <= index <= len(batch):
            logger.warning(f"Skipping {question_type.value} reply item with index {index} (batch size {len(batch)})")
            continue
        if index in used_indexes:
            logger.warning(f"Skipping duplicate {question_type.value} reply item for index {index}")
            continue

        question = build_question(question_type, batch[index - 1], item, locale, translate, rng)
        if question is not None:
            used_indexes.add(index)
            questions.append(question)

    return questions


def parse_single_reply(
    question_type: QuestionType,
    raw: Optional[str],
    track: Track,
    locale: str,
    translate: Translate,
    rng: Optional[random.Random] = None,
) -> Optional[GeneratedQuestion]:
    question_type = QuestionType(question_type)
    data = parse_function_arguments(raw)
    if data is None:
        return None
    try:
        item = REPLY_MODELS[question_type].model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid {question_type.value} reply for track {track.track_id}: {e.error_count()} validation error(s)")
        return None
    return build_question(question_type, track, item, locale, translate, rng)


def parse_wrong_options(raw: Optional[str], correct_answer: str) -> List[str]:
    data = parse_function_arguments(raw)
    if data is None:
        return []
    try:
        reply = WrongOptionsReply.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid wrong options reply: {e.error_count()} validation error(s)")
        return []
    return dedupe_distractors(correct_answer, reply.wrong_options)[:REQUIRED_DISTRACTORS]
