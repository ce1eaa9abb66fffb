# Command-line entry point: turns a playlist JSON file into quiz questions
# quizcards/main.py
import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional, Sequence

# Add project root to sys.path to allow for absolute imports
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from pydantic import ValidationError

from quizcards import state_manager
from quizcards.models.question import GeneratedQuestion, ProgressEvent
from quizcards.models.track import TrackRow
from quizcards.services.quiz_generator import QuizGenerator
from quizcards.services.quiz_helper import MAX_QUESTIONS, MIN_TRACKS, QuizHelper, quiz_helper
from quizcards.services.translation import translation
from quizcards.utils.config import settings
from quizcards.utils.logger import logger


def load_playlist(path: str) -> List[TrackRow]:
    """Reads playlist rows from a JSON list of objects with id, track_id, name, artist and year."""
    with open(path, mode="r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON list of tracks in {path}")

    rows = []
    for position, entry in enumerate(data):
        try:
            if isinstance(entry, dict):
                entry = {"track_order": position, **entry}
            rows.append(TrackRow.model_validate(entry))
        except ValidationError as e:
            logger.error(f"Skipping playlist entry {position}: {e.error_count()} validation error(s)")
    return rows


async def build_quiz(
    rows: Sequence[TrackRow],
    locale: str,
    question_types: Optional[Sequence[str]] = None,
    selected_track_ids: Optional[Sequence[str]] = None,
    use_ai: bool = True,
    generator: Optional[QuizGenerator] = None,
    helper: Optional[QuizHelper] = None,
) -> List[GeneratedQuestion]:
    """Selects tracks, assigns question types and generates the questions, in shuffled order."""
    helper = helper or quiz_helper

    if selected_track_ids:
        rows = helper.filter_selected_tracks(rows, selected_track_ids)
    rows = list(rows)[:MAX_QUESTIONS]
    if len(rows) < MIN_TRACKS:
        raise ValueError(f"At least {MIN_TRACKS} valid tracks are required, got {len(rows)}")

    tracks = helper.assign_question_types(rows, question_types)
    generation_id = state_manager.start_generation(len(tracks))

    try:
        if not use_ai:
            questions = helper.generate_standard_questions(tracks, rows, locale)
        else:
            ai_tracks, standard_tracks = helper.split_ai_tracks(tracks)
            logger.info(f"Generating questions for {len(ai_tracks)} AI tracks + {len(standard_tracks)} standard tracks")
            standard_questions = helper.generate_standard_questions(standard_tracks, rows, locale) if standard_tracks else []
            state_manager.set_progress(generation_id, step="nonAi", current=len(standard_questions))

            ai_questions = []
            if ai_tracks:
                generator = generator or QuizGenerator()
                store_progress = state_manager.progress_callback(generation_id, offset=len(standard_questions))

                def on_progress(event: ProgressEvent) -> None:
                    store_progress(event)
                    state = state_manager.get_progress(generation_id)
                    logger.info(f"[{state['current']}/{state['total']}] {translation.translate(event.detail, locale)}")

                ai_questions = await generator.generate_quiz_questions(ai_tracks, locale, on_progress)
            questions = ai_questions + standard_questions

        questions = helper.shuffle(questions)
    except Exception:
        state_manager.fail_generation(generation_id)
        raise

    state_manager.complete_generation(generation_id, len(questions))
    logger.info(f"Created quiz with {len(questions)} questions")
    return questions


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Generate music quiz questions from a playlist JSON file.")
    ap.add_argument("playlist", help="Path to a JSON list of tracks (id, track_id, name, artist, year)")
    ap.add_argument("--locale", default=settings.default_locale, help="Language code for the questions, e.g. en or nl")
    ap.add_argument("--types", default=None,
                    help="Comma separated question types to cycle through, e.g. year,trivia,artist")
    ap.add_argument("--selected", default=None, help="Comma separated track ids to include (default: all)")
    ap.add_argument("--no-ai", action="store_true", help="Only generate questions that need no LLM")
    ap.add_argument("--output", default=None, help="Write the questions to this JSON file instead of stdout")
    return ap.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    question_types = [t.strip() for t in args.types.split(",") if t.strip()] if args.types else None
    selected = [t.strip() for t in args.selected.split(",") if t.strip()] if args.selected else None

    rows = load_playlist(args.playlist)
    questions = asyncio.run(build_quiz(
        rows,
        locale=args.locale,
        question_types=question_types,
        selected_track_ids=selected,
        use_ai=not args.no_ai,
    ))

    payload = json.dumps([q.model_dump() for q in questions], indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, mode="w", encoding="utf-8") as f:
            f.write(payload)
        print(args.output)  # machine-readable path for caller
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
