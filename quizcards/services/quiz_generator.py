# Quiz question generation: walks the question types in a fixed order and asks the LLM batch by batch
# quizcards/services/quiz_generator.py
import random
from typing import List, Optional, Sequence, TypeVar

from quizcards.models.enums import AI_QUESTION_TYPES, QuestionType
from quizcards.models.question import GeneratedQuestion, QuestionContent
from quizcards.models.track import Track
from quizcards.services.llm_client import FunctionCallingLLM, get_llm_client
from quizcards.services.progress import ProgressCallback, ProgressReporter
from quizcards.services.prompt_library import (
    PROMPT_LIBRARY,
    build_batch_prompt,
    build_single_prompt,
    build_wrong_options_prompt,
)
from quizcards.services.response_parser import (
    REQUIRED_DISTRACTORS,
    parse_batch_reply,
    parse_single_reply,
    parse_wrong_options,
)
from quizcards.services.translation import Translate, translation
from quizcards.utils.config import Settings, settings
from quizcards.utils.logger import logger

T = TypeVar("T")


class QuizGenerationError(RuntimeError):
    """Raised for requests the pipeline cannot serve, such as an unknown question type."""


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


class QuizGenerator:
    def __init__(
        self,
        llm: Optional[FunctionCallingLLM] = None,
        translate: Optional[Translate] = None,
        config: Settings = settings,
        rng: Optional[random.Random] = None,
    ):
        self._llm = llm
        self.translate = translate or translation
        self.batch_size = config.quiz_batch_size
        self.default_locale = config.default_locale
        self.rng = rng or random.Random()
        logger.info(f"QuizGenerator initialized (batch size {self.batch_size}, default locale '{self.default_locale}')")

    @property
    def llm(self) -> FunctionCallingLLM:
        # Created on first use so year-only quizzes never touch the provider
        if self._llm is None:
            self._llm = get_llm_client()
        return self._llm

    def year_question(self, track: Track, locale: str) -> GeneratedQuestion:
        return GeneratedQuestion(
            track_id=track.track_id,
            type=QuestionType.YEAR.value,
            question=self.translate("quiz.yearQuestion", locale),
            options=None,
            correct_answer=str(track.year),
        )

    async def generate_quiz_questions(
        self,
        tracks: Sequence[Track],
        locale: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[GeneratedQuestion]:
        """
        Generates one question per track, type by type (year, trivia, artist,
        missing_word, title) and batch by batch, strictly sequentially.

        Batches whose reply cannot be used contribute no questions; the result
        may therefore be shorter than the input. Provider errors are raised.
        Results are grouped by type, then batch, then reply order.
        """
        locale = locale or self.default_locale
        reporter = ProgressReporter(on_progress)

        unsupported = sorted({track.type.value for track in tracks if track.type not in AI_QUESTION_TYPES})
        if unsupported:
            raise QuizGenerationError(f"Question type(s) not generated by the LLM pipeline: {', '.join(unsupported)}")

        results: List[GeneratedQuestion] = []
        for question_type in AI_QUESTION_TYPES:
            typed_tracks = [track for track in tracks if track.type == question_type]
            if not typed_tracks:
                continue

            if question_type == QuestionType.YEAR:
                results.extend(self.year_question(track, locale) for track in typed_tracks)
                await reporter.emit(question_type.value, len(results))
                continue

            batches = chunked(typed_tracks, self.batch_size)
            logger.info(f"Generating {len(typed_tracks)} {question_type.value} questions in {len(batches)} batch(es)")
            for batch_number, batch in enumerate(batches, start=1):
                questions = await self._generate_batch(question_type, batch, locale)
                if len(questions) < len(batch):
                    logger.warning(
                        f"{question_type.value} batch {batch_number}/{len(batches)}: "
                        f"{len(questions)} of {len(batch)} questions usable"
                    )
                results.extend(questions)
                await reporter.emit(question_type.value, len(results))

        logger.info(f"Generated {len(results)} of {len(tracks)} quiz questions (locale '{locale}')")
        return results

    async def _generate_batch(self, question_type: QuestionType, batch: Sequence[Track], locale: str) -> List[GeneratedQuestion]:
        prompt = build_batch_prompt(question_type, batch, locale)
        raw = await self.llm.call_function(prompt.system, prompt.user, prompt.function)
        return parse_batch_reply(question_type, raw, batch, locale, self.translate, self.rng)

    async def regenerate_quiz_question(
        self,
        track: Track,
        question_type: str,
        locale: Optional[str] = None,
        current_question: Optional[QuestionContent] = None,
    ) -> QuestionContent:
        """
        Generates a fresh question of the given type for one track, steering the
        model away from the current question. Falls back to a year question
        whenever the LLM does not deliver a usable one.
        """
        locale = locale or self.default_locale
        try:
            question_type = QuestionType(question_type)
        except ValueError:
            raise QuizGenerationError(f"Unknown question type: {question_type}")

        if question_type == QuestionType.YEAR:
            return self.year_question(track, locale).content()
        if question_type not in PROMPT_LIBRARY:
            raise QuizGenerationError(f"Question type '{question_type.value}' is not generated by the LLM")

        question = None
        try:
            prompt = build_single_prompt(question_type, track, locale, previous=current_question)
            raw = await self.llm.call_function(prompt.system, prompt.user, prompt.function)
            question = parse_single_reply(question_type, raw, track, locale, self.translate, self.rng)
        except Exception as e:
            logger.exception(f"Error regenerating {question_type.value} question for track {track.track_id}: {e}")

        if question is None:
            logger.warning(f"Falling back to a year question for track {track.track_id}")
            return self.year_question(track, locale).content()
        return question.content()

    async def generate_wrong_options(
        self,
        question: str,
        correct_answer: str,
        track: Track,
        locale: Optional[str] = None,
        current_wrong_options: Optional[Sequence[str]] = None,
    ) -> List[str]:
        """Asks for up to three distinct wrong options for a hand-written question."""
        locale = locale or self.default_locale
        prompt = build_wrong_options_prompt(question, correct_answer, track, locale, current_wrong_options)
        raw = await self.llm.call_function(prompt.system, prompt.user, prompt.function)
        options = parse_wrong_options(raw, correct_answer)
        if len(options) < REQUIRED_DISTRACTORS:
            logger.warning(f"Only {len(options)} usable wrong options for track {track.track_id}")
        return options
