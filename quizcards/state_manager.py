# In-memory progress snapshots for running quiz generations, polled by whoever started them
# quizcards/state_manager.py
import time
import uuid
from typing import Callable, Dict, Optional

from quizcards.models.enums import GenerationStatus
from quizcards.models.question import ProgressEvent
from quizcards.services.progress import ProgressCallback
from quizcards.utils.config import settings
from quizcards.utils.logger import logger

generation_states: Dict[str, dict] = {}

# Each snapshot lives for settings.progress_ttl_seconds after its last write
expires_at: Dict[str, float] = {}
clock: Callable[[], float] = time.monotonic


def _store(generation_id: str, state: dict) -> None:
    generation_states[generation_id] = state
    expires_at[generation_id] = clock() + settings.progress_ttl_seconds


def purge_expired() -> int:
    """Drops snapshots whose time to live has passed. Returns how many were removed."""
    now = clock()
    expired = [generation_id for generation_id, deadline in expires_at.items() if deadline <= now]
    for generation_id in expired:
        expires_at.pop(generation_id, None)
        generation_states.pop(generation_id, None)
    if expired:
        logger.debug(f"Purged {len(expired)} expired generation snapshot(s)")
    return len(expired)


def start_generation(total: int, generation_id: Optional[str] = None) -> str:
    """Registers a new generation and returns its id."""
    purge_expired()
    generation_id = generation_id or str(uuid.uuid4())
    _store(generation_id, {
        "status": GenerationStatus.GENERATING.value,
        "step": "starting",
        "current": 0,
        "total": total,
    })
    logger.debug(f"Started tracking generation {generation_id} ({total} tracks)")
    return generation_id


def set_progress(generation_id: str, step: str, current: int, message: Optional[str] = None) -> None:
    state = generation_states.get(generation_id)
    if state is None:
        logger.warning(f"Progress update for unknown generation {generation_id}")
        return
    state.update({
        "status": GenerationStatus.GENERATING.value,
        "step": step,
        "current": min(current, state["total"]),
    })
    if message is not None:
        state["message"] = message
    _store(generation_id, state)


def complete_generation(generation_id: str, question_count: int, quiz_id: Optional[int] = None) -> None:
    _store(generation_id, {
        "status": GenerationStatus.COMPLETE.value,
        "question_count": question_count,
        "quiz_id": quiz_id,
    })


def fail_generation(generation_id: str, error: str = "quiz.generateError") -> None:
    _store(generation_id, {
        "status": GenerationStatus.ERROR.value,
        "error": error,
    })


def get_progress(generation_id: str) -> Optional[dict]:
    purge_expired()
    state = generation_states.get(generation_id)
    return dict(state) if state is not None else None


def progress_callback(generation_id: str, offset: int = 0) -> ProgressCallback:
    """
    Adapts the store into a pipeline progress callback. `offset` counts
    questions that were produced outside the pipeline (e.g. non-AI questions).
    """
    def on_progress(event: ProgressEvent) -> None:
        set_progress(
            generation_id,
            step=event.step,
            current=offset + event.questions_generated,
            message=event.detail,
        )
    return on_progress
