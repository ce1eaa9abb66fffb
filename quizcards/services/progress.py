# quizcards/services/progress.py
import inspect
from typing import Awaitable, Callable, Optional, Union

from quizcards.models.question import ProgressEvent
from quizcards.utils.logger import logger

ProgressCallback = Callable[[ProgressEvent], Union[None, Awaitable[None]]]


class ProgressReporter:
    """Forwards pipeline progress to an optional sync or async callback."""

    def __init__(self, callback: Optional[ProgressCallback] = None):
        self.callback = callback

    async def emit(self, step: str, questions_generated: int) -> None:
        if self.callback is None:
            return
        event = ProgressEvent(
            step=step,
            detail=f"quiz.progress.{step}",
            questions_generated=questions_generated,
        )
        try:
            result = self.callback(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            # A broken reporter must not abort generation
            logger.exception(f"Progress callback failed for step '{step}': {e}")
