# quizcards/services/prompt_library.py
from typing import Dict, List, Optional, Sequence

from langchain_core.prompts import PromptTemplate
from pydantic import BaseModel, ConfigDict

from quizcards.models.enums import QuestionType
from quizcards.models.question import QuestionContent
from quizcards.models.track import Track

LANGUAGE_NAMES = {
    "en": "English",
    "nl": "Dutch",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "pl": "Polish",
    "sv": "Swedish",
    "da": "Danish",
    "no": "Norwegian",
    "fi": "Finnish",
    "jp": "Japanese",
    "ja": "Japanese",
    "cn": "Chinese",
    "zh": "Chinese",
    "ko": "Korean",
}

def language_name(locale: Optional[str]) -> str:
    """English name of the language for a locale code such as 'nl' or 'pt-BR'."""
    if not locale:
        return LANGUAGE_NAMES["en"]
    code = locale.lower().replace("_", "-").split("-")[0]
    return LANGUAGE_NAMES.get(code, LANGUAGE_NAMES["en"])


class PromptSpec(BaseModel):
    """Everything needed for one schema-constrained LLM call."""
    system: str
    user: str
    function: dict


class QuestionPrompt(BaseModel):
    """Prompt strategy for one AI question type."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    function_name: str
    function_description: str
    system: PromptTemplate
    batch: PromptTemplate
    single: PromptTemplate
    item_properties: Dict[str, dict]
    required: List[str]


def _string_list(description: str, count: int = 3) -> dict:
    return {
        "type": "array",
        "items": {"type": "string"},
        "minItems": count,
        "maxItems": count,
        "description": description,
    }


PROMPT_LIBRARY: Dict[QuestionType, QuestionPrompt] = {
    QuestionType.TRIVIA: QuestionPrompt(
        function_name="createTriviaQuestions",
        function_description="Store multiple-choice trivia questions about songs",
        system=PromptTemplate.from_template(
            """You are a music quiz master writing questions for a music trivia card game.
Write every question and every answer option in {language}.
Each question must be based on a verifiable, interesting fact about the song: its recording, its lyrics, its chart history, the story behind it or the people involved.
Never ask for the release year, the artist or the title; those are covered by other questions.
When a question refers to lyrics, quote them in their original language and do not translate them.
Give exactly one correct answer and three wrong answers that are plausible but clearly incorrect to someone who knows the fact."""
        ),
        batch=PromptTemplate.from_template(
            """Write one trivia question for each of the following songs. Use the number in front of each song as its index.

{tracks}"""
        ),
        single=PromptTemplate.from_template(
            """Write one trivia question for the song "{name}" by {artist} ({year}).{avoid}"""
        ),
        item_properties={
            "question": {"type": "string", "description": "The trivia question"},
            "correctAnswer": {"type": "string", "description": "The correct answer"},
            "wrongAnswers": _string_list("Three plausible but wrong answers"),
        },
        required=["question", "correctAnswer", "wrongAnswers"],
    ),
    QuestionType.ARTIST: QuestionPrompt(
        function_name="createArtistOptions",
        function_description="Store alternative artist names used as wrong answers",
        system=PromptTemplate.from_template(
            """You are a music quiz master writing answer options for the question "Who is the artist of this song?" in a music trivia card game.
For every song, name three other real artists from the same genre, style and era who could plausibly have recorded it.
Never return the real artist, a member of the real artist or a different spelling of the real artist.
Artist names are proper names: do not translate them, even though the players speak {language}."""
        ),
        batch=PromptTemplate.from_template(
            """Give three alternative artists for each of the following songs. Use the number in front of each song as its index.

{tracks}"""
        ),
        single=PromptTemplate.from_template(
            """Give three alternative artists for the song "{name}" by {artist} ({year}).{avoid}"""
        ),
        item_properties={
            "wrongArtists": _string_list("Three other artists in the same genre and style"),
        },
        required=["wrongArtists"],
    ),
    QuestionType.MISSING_WORD: QuestionPrompt(
        function_name="createMissingWordQuestions",
        function_description="Store song titles with one word blanked out",
        system=PromptTemplate.from_template(
            """You are a music quiz master writing "complete the title" questions for a music trivia card game.
For every song, choose one meaningful word from the title (avoid articles and other filler words when possible) and replace exactly that word with ___ to form the blanked title. Keep the rest of the title exactly as given, in its original language.
Then give three alternative words that would fit the blank in a believable way. The alternatives must be real, different words: never a spelling variant, a plural, a different tense or a different capitalisation of the missing word.
The players speak {language}; keep the title words in the language of the title."""
        ),
        batch=PromptTemplate.from_template(
            """Create a missing word question for each of the following songs. Use the number in front of each song as its index.

{tracks}"""
        ),
        single=PromptTemplate.from_template(
            """Create a missing word question for the song "{name}" by {artist} ({year}).{avoid}"""
        ),
        item_properties={
            "blankedTitle": {"type": "string", "description": "The title with the chosen word replaced by ___"},
            "missingWord": {"type": "string", "description": "The word that was blanked out, exactly as it appears in the title"},
            "wrongWords": _string_list("Three alternative words that could fill the blank"),
        },
        required=["blankedTitle", "missingWord", "wrongWords"],
    ),
    QuestionType.TITLE: QuestionPrompt(
        function_name="createTitleOptions",
        function_description="Store alternative song titles used as wrong answers",
        system=PromptTemplate.from_template(
            """You are a music quiz master writing answer options for the question "What is the title of this song?" in a music trivia card game.
For every song, give three wrong titles. Good wrong titles are other songs by the same artist, well-known lyric lines of the song that people often mistake for the title, or titles of similar songs from the same era.
Never return the real title or a different spelling of it. Song titles are proper names: do not translate them, even though the players speak {language}."""
        ),
        batch=PromptTemplate.from_template(
            """Give three wrong titles for each of the following songs. Use the number in front of each song as its index.

{tracks}"""
        ),
        single=PromptTemplate.from_template(
            """Give three wrong titles for the song "{name}" by {artist} ({year}).{avoid}"""
        ),
        item_properties={
            "wrongTitles": _string_list("Three wrong song titles"),
        },
        required=["wrongTitles"],
    ),
}

WRONG_OPTIONS_FUNCTION = {
    "name": "createWrongOptions",
    "description": "Store wrong answer options for a quiz question",
    "parameters": {
        "type": "object",
        "properties": {
            "wrongOptions": _string_list("Three plausible but wrong answers"),
        },
        "required": ["wrongOptions"],
    },
}

WRONG_OPTIONS_SYSTEM = PromptTemplate.from_template(
    """You are a music quiz master writing answer options for a music trivia card game.
Given a question about a song and its correct answer, write three wrong answers in {language} that are plausible, of the same kind and length as the correct answer, and clearly different from it and from each other.
Song titles, artist names and quoted lyrics are never translated."""
)

WRONG_OPTIONS_USER = PromptTemplate.from_template(
    """Song: "{name}" by {artist}
Question: {question}
Correct answer: {correct_answer}{avoid}"""
)


def get_question_prompt(question_type: QuestionType) -> QuestionPrompt:
    prompt = PROMPT_LIBRARY.get(QuestionType(question_type))
    if prompt is None:
        raise KeyError(f"No LLM prompt for question type '{question_type}'")
    return prompt


def format_track_list(tracks: Sequence[Track]) -> str:
    """One line per track, numbered from 1 so replies can refer back by index."""
    return "\n".join(
        f'{index}. "{track.name}" by {track.artist} ({track.year})'
        for index, track in enumerate(tracks, start=1)
    )


def batch_function(prompt: QuestionPrompt) -> dict:
    return {
        "name": prompt.function_name,
        "description": prompt.function_description,
        "parameters": {
            "type": "object",
            "properties": {
                "questions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "index": {"type": "integer", "description": "The number of the song in the list"},
                            **prompt.item_properties,
                        },
                        "required": ["index", *prompt.required],
                    },
                },
            },
            "required": ["questions"],
        },
    }


def single_function(prompt: QuestionPrompt) -> dict:
    return {
        "name": prompt.function_name,
        "description": prompt.function_description,
        "parameters": {
            "type": "object",
            "properties": dict(prompt.item_properties),
            "required": list(prompt.required),
        },
    }


def avoid_clause(previous: Optional[QuestionContent] = None, previous_options: Optional[Sequence[str]] = None) -> str:
    """Instruction appended on regeneration so the model does not repeat itself."""
    parts = []
    if previous is not None and previous.question:
        parts.append(f'Do not reuse this previous question: "{previous.question}".')
    options = list(previous_options or [])
    if previous is not None and isinstance(previous.options, list):
        options.extend(opt for opt in previous.options if isinstance(opt, str))
    if options:
        quoted = ", ".join(f'"{opt}"' for opt in dict.fromkeys(options))
        parts.append(f"Avoid reusing these previous option(s): {quoted}.")
    if not parts:
        return ""
    return "\n\n" + " ".join(parts)


def build_batch_prompt(question_type: QuestionType, tracks: Sequence[Track], locale: str) -> PromptSpec:
    prompt = get_question_prompt(question_type)
    return PromptSpec(
        system=prompt.system.format(language=language_name(locale)),
        user=prompt.batch.format(tracks=format_track_list(tracks)),
        function=batch_function(prompt),
    )


def build_single_prompt(
    question_type: QuestionType,
    track: Track,
    locale: str,
    previous: Optional[QuestionContent] = None,
) -> PromptSpec:
    prompt = get_question_prompt(question_type)
    return PromptSpec(
        system=prompt.system.format(language=language_name(locale)),
        user=prompt.single.format(
            name=track.name,
            artist=track.artist,
            year=track.year,
            avoid=avoid_clause(previous),
        ),
        function=single_function(prompt),
    )


def build_wrong_options_prompt(
    question: str,
    correct_answer: str,
    track: Track,
    locale: str,
    current_wrong_options: Optional[Sequence[str]] = None,
) -> PromptSpec:
    return PromptSpec(
        system=WRONG_OPTIONS_SYSTEM.format(language=language_name(locale)),
        user=WRONG_OPTIONS_USER.format(
            name=track.name,
            artist=track.artist,
            question=question,
            correct_answer=correct_answer,
            avoid=avoid_clause(previous_options=current_wrong_options),
        ),
        function=WRONG_OPTIONS_FUNCTION,
    )
