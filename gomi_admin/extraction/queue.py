"""
Sequential task queue with a pluggable pause between tasks.

Extraction calls hit a rate-limited service, so tasks run strictly one after
another. A failing task yields an empty result and never stops later tasks.
"""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from gomi_admin.extraction.schemas import ExtractedData

logger = logging.getLogger(__name__)


@dataclass
class ChunkOutcome:
    index: int
    data: ExtractedData = field(default_factory=ExtractedData)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DelayPolicy(Protocol):
    def delay_before(self, index: int, previous_failed: bool) -> float: ...


class FixedDelay:
    """Same pause before every task but the first."""

    def __init__(self, seconds: float = 2.0):
        self.seconds = seconds

    def delay_before(self, index: int, previous_failed: bool) -> float:
        return 0.0 if index == 0 else self.seconds


class ExponentialBackoffDelay:
    """
    Pause that doubles (by `factor`) after each consecutive failure and drops
    back to `base_seconds` after a success.
    """

    def __init__(self, base_seconds: float = 2.0, factor: float = 2.0, max_seconds: float = 60.0):
        self.base_seconds = base_seconds
        self.factor = factor
        self.max_seconds = max_seconds
        self._failures = 0

    def delay_before(self, index: int, previous_failed: bool) -> float:
        if index == 0:
            self._failures = 0
            return 0.0
        self._failures = self._failures + 1 if previous_failed else 0
        return min(self.base_seconds * self.factor**self._failures, self.max_seconds)


Task = Callable[[], ExtractedData]


class SequentialTaskQueue:
    def __init__(
        self,
        delay_policy: DelayPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.delay_policy = delay_policy or FixedDelay()
        self._sleep = sleep

    def run(self, tasks: Iterable[Task]) -> list[ChunkOutcome]:
        tasks = list(tasks)
        outcomes: list[ChunkOutcome] = []
        previous_failed = False

        for index, task in enumerate(tasks):
            delay = self.delay_policy.delay_before(index, previous_failed)
            if delay > 0:
                logger.debug("Waiting %.1fs before task %s/%s", delay, index + 1, len(tasks))
                self._sleep(delay)

            logger.info("Processing chunk %s/%s", index + 1, len(tasks))
            try:
                outcome = ChunkOutcome(index, task())
            except Exception as e:
                logger.warning("Chunk %s/%s failed: %s", index + 1, len(tasks), e)
                outcome = ChunkOutcome(index, ExtractedData(), error=str(e) or type(e).__name__)

            outcomes.append(outcome)
            previous_failed = not outcome.ok

        return outcomes
