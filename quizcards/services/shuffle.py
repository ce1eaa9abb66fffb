# quizcards/services/shuffle.py
import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

MAX_OPTIONS = 4

def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Fisher-Yates shuffle on a copy of the input."""
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled

def build_options(correct_answer: str, distractors: Sequence[str], rng: Optional[random.Random] = None) -> List[str]:
    """Puts the correct answer among at most three distractors, in random order."""
    return shuffle([correct_answer, *distractors[:MAX_OPTIONS - 1]], rng)

def dedupe_distractors(correct_answer: str, candidates: Sequence[str]) -> List[str]:
    """
    Drops empty candidates and candidates that repeat the correct answer or an
    earlier candidate. Comparison ignores case and surrounding whitespace.
    """
    seen = {correct_answer.strip().casefold()}
    distinct = []
    for candidate in candidates:
        if not isinstance(candidate, str):
            continue
        cleaned = candidate.strip()
        key = cleaned.casefold()
        if not cleaned or key in seen:
            continue
        seen.add(key)
        distinct.append(cleaned)
    return distinct
