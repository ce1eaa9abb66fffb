# quizcards/services/quiz_helper.py
import random
from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from quizcards.models.enums import NON_AI_QUESTION_TYPES, QuestionType
from quizcards.models.question import GeneratedQuestion, ReleaseOrderOption
from quizcards.models.track import Track, TrackRow
from quizcards.services.shuffle import dedupe_distractors, shuffle
from quizcards.services.translation import Translate, translation
from quizcards.utils.logger import logger

MAX_QUESTIONS = 100
MIN_TRACKS = 5
DEFAULT_YEAR = 2000
FIRST_DECADE = 1900

DEFAULT_QUESTION_TYPES = [
    QuestionType.YEAR,
    QuestionType.TRIVIA,
    QuestionType.ARTIST,
    QuestionType.TITLE,
    QuestionType.MISSING_WORD,
    QuestionType.RELEASE_ORDER,
    QuestionType.DECADE,
]


def word_count(title: str) -> int:
    return len(title.split())


class QuizHelper:
    """Question type assignment and the questions that need no LLM."""

    def __init__(self, translate: Optional[Translate] = None, rng: Optional[random.Random] = None):
        self.translate = translate or translation
        self.rng = rng or random.Random()

    def shuffle(self, items: Sequence) -> list:
        return shuffle(items, self.rng)

    def filter_selected_tracks(self, rows: Iterable[TrackRow], selected_track_ids: Iterable[str]) -> List[TrackRow]:
        """Keeps the rows whose provider id was selected, in playlist order."""
        selected = set(selected_track_ids)
        return [row for row in rows if row.track_id in selected]

    def assign_question_types(self, rows: Sequence[TrackRow], question_types: Optional[Sequence[str]] = None) -> List[Track]:
        """
        Cycles through the requested question types, avoiding the same type on
        two consecutive tracks. missing_word needs a title of 3+ words and
        release_order/decade need a known release year.
        """
        types = [QuestionType(t) for t in question_types] if question_types else list(DEFAULT_QUESTION_TYPES)
        type_index = 0
        last_type = None
        assigned = []

        for row in rows:
            question_type = types[type_index % len(types)]
            type_index += 1

            if question_type == QuestionType.MISSING_WORD and word_count(row.name) < 3:
                for attempt in range(len(types)):
                    candidate = types[(type_index + attempt) % len(types)]
                    if candidate != QuestionType.MISSING_WORD and candidate != last_type:
                        question_type = candidate
                        break
                if question_type == QuestionType.MISSING_WORD:
                    question_type = QuestionType.TRIVIA

            if question_type in NON_AI_QUESTION_TYPES and not row.year:
                question_type = next(
                    (t for t in types if t not in NON_AI_QUESTION_TYPES and t != last_type),
                    QuestionType.TRIVIA,
                )

            if question_type == last_type and len(types) > 1:
                question_type = types[type_index % len(types)]
                type_index += 1
                if question_type == QuestionType.MISSING_WORD and word_count(row.name) < 3:
                    question_type = next(
                        (t for t in types if t != QuestionType.MISSING_WORD and t != last_type),
                        QuestionType.TRIVIA,
                    )

            last_type = question_type
            assigned.append(Track(
                track_id=row.id,
                name=row.name,
                artist=row.artist,
                year=row.year or DEFAULT_YEAR,
                type=question_type,
            ))

        return assigned

    def split_ai_tracks(self, tracks: Iterable[Track]) -> Tuple[List[Track], List[Track]]:
        """Splits tracks into (LLM-generated, locally generated) question types."""
        ai_tracks, standard_tracks = [], []
        for track in tracks:
            (standard_tracks if track.type in NON_AI_QUESTION_TYPES else ai_tracks).append(track)
        return ai_tracks, standard_tracks

    def generate_standard_questions(
        self,
        tracks: Sequence[Track],
        all_tracks: Optional[Sequence[TrackRow]] = None,
        locale: str = "en",
    ) -> List[GeneratedQuestion]:
        """
        Builds questions without the LLM. Year, artist and missing_word get a
        free-form answer, title uses other playlist titles as wrong options,
        and trivia is left blank for the user to fill in.
        """
        logger.info(f"Quick-generating {len(tracks)} questions (no AI)")
        all_tracks = all_tracks or []
        questions = []

        for track in tracks:
            if track.type == QuestionType.YEAR:
                questions.append(self._year_question(track, locale))
            elif track.type == QuestionType.ARTIST:
                questions.append(GeneratedQuestion(
                    track_id=track.track_id,
                    type=QuestionType.ARTIST.value,
                    question=self.translate("quiz.artistQuestion", locale),
                    options=None,
                    correct_answer=track.artist,
                ))
            elif track.type == QuestionType.TITLE:
                questions.append(self._title_question(track, all_tracks, locale))
            elif track.type == QuestionType.MISSING_WORD:
                questions.append(self._missing_word_question(track, locale))
            elif track.type == QuestionType.RELEASE_ORDER:
                questions.append(self._release_order_question(track, all_tracks, locale))
            elif track.type == QuestionType.DECADE:
                questions.append(self._decade_question(track, locale))
            else:
                questions.append(GeneratedQuestion(
                    track_id=track.track_id,
                    type=QuestionType.TRIVIA.value,
                    question="",
                    options=None,
                    correct_answer="",
                ))

        return questions

    def _year_question(self, track: Track, locale: str) -> GeneratedQuestion:
        return GeneratedQuestion(
            track_id=track.track_id,
            type=QuestionType.YEAR.value,
            question=self.translate("quiz.yearQuestion", locale),
            options=None,
            correct_answer=str(track.year),
        )

    def _missing_word_question(self, track: Track, locale: str) -> GeneratedQuestion:
        words = track.name.split()
        remove_index = self.rng.randrange(len(words)) if words else 0
        missing_word = words[remove_index] if words else ""
        blanked = " ".join("___" if i == remove_index else word for i, word in enumerate(words))
        return GeneratedQuestion(
            track_id=track.track_id,
            type=QuestionType.MISSING_WORD.value,
            question=f"{blanked}\n{self.translate('quiz.missingWordQuestion', locale)}",
            options=None,
            correct_answer=missing_word,
        )

    def _title_question(self, track: Track, all_tracks: Sequence[TrackRow], locale: str) -> GeneratedQuestion:
        candidates = [row.name for row in all_tracks if row.id != track.track_id and row.name != track.name]
        wrong_titles = dedupe_distractors(track.name, self.shuffle(candidates))[:3]
        while len(wrong_titles) < 3:
            wrong_titles.append(f"Track {len(wrong_titles) + 2}")

        return GeneratedQuestion(
            track_id=track.track_id,
            type=QuestionType.TITLE.value,
            question=self.translate("quiz.titleQuestion", locale),
            options=self.shuffle([track.name, *wrong_titles]),
            correct_answer=track.name,
        )

    def _release_order_question(self, track: Track, all_tracks: Sequence[TrackRow], locale: str) -> GeneratedQuestion:
        """
        Places the track among 3 others with different release years, sorted
        chronologically. The answer is the index of the track in that order.
        """
        candidates = [row for row in all_tracks if row.id != track.track_id and row.year and row.year != track.year]
        picked = []
        used_years = {track.year}
        for row in self.shuffle(candidates):
            if len(picked) >= 3:
                break
            if row.year not in used_years:
                picked.append(row)
                used_years.add(row.year)

        if len(picked) < 3:
            logger.debug(f"Not enough tracks with distinct years for release order on track {track.track_id}")
            return self._year_question(track, locale)

        entries = [(track.year, f"{track.artist} - {track.name}", True)]
        entries.extend((row.year, f"{row.artist} - {row.name}", False) for row in picked)
        entries.sort(key=lambda entry: entry[0])

        correct_index = next(i for i, entry in enumerate(entries) if entry[2])
        return GeneratedQuestion(
            track_id=track.track_id,
            type=QuestionType.RELEASE_ORDER.value,
            question=self.translate("quiz.releaseOrderQuestion", locale),
            options=[ReleaseOrderOption(label=label, year=year) for year, label, _ in entries],
            correct_answer=str(correct_index),
        )

    def _decade_question(self, track: Track, locale: str) -> GeneratedQuestion:
        """Wrong options are the neighbouring decades (-1, +1, -2, +2), kept within 1900 and the current decade."""
        correct_decade = track.year // 10 * 10
        current_decade = date.today().year // 10 * 10

        wrong_decades = []
        for offset in (-10, 10, -20, 20):
            decade = correct_decade + offset
            if FIRST_DECADE <= decade <= current_decade:
                wrong_decades.append(decade)
        wrong_decades = wrong_decades[:3]

        while len(wrong_decades) < 3:
            fallback = correct_decade - (len(wrong_decades) + 1) * 10
            if fallback >= FIRST_DECADE and fallback not in wrong_decades:
                wrong_decades.append(fallback)
            else:
                wrong_decades.append(correct_decade + (len(wrong_decades) + 2) * 10)

        options = [f"{decade}s" for decade in [correct_decade, *wrong_decades]]
        return GeneratedQuestion(
            track_id=track.track_id,
            type=QuestionType.DECADE.value,
            question=self.translate("quiz.decadeQuestion", locale),
            options=self.shuffle(options),
            correct_answer=f"{correct_decade}s",
        )

quiz_helper = QuizHelper()
