"""
Timed, strictly sequential repetitions of a batch download.
"""

import time
from typing import Any, Awaitable, Callable, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .extractor import MediaSet

logger = structlog.get_logger(__name__)

NUM_TRIAL_RUNS = 5


def perf_counter_ms() -> float:
    return time.perf_counter() * 1000.0


class TrialResult(BaseModel):
    """Aggregate and per-trial wall-clock durations of one trial run, in milliseconds."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_duration_ms: float = Field(alias='totalDurationMs', ge=0)
    per_trial_duration_ms: Tuple[float, ...] = Field(alias='perTrialDurationMs', min_length=1)
    average_ms: float = Field(alias='averageMs', ge=0)

    @field_validator('per_trial_duration_ms')
    @classmethod
    def _durations_non_negative(cls, value: Tuple[float, ...]) -> Tuple[float, ...]:
        if any(duration < 0 for duration in value):
            raise ValueError("trial durations must be non-negative")
        return value

    @model_validator(mode='after')
    def _average_matches_total(self) -> 'TrialResult':
        if self.average_ms != self.total_duration_ms / len(self.per_trial_duration_ms):
            raise ValueError("averageMs must equal totalDurationMs / number of trials")
        return self

    @property
    def trial_count(self) -> int:
        return len(self.per_trial_duration_ms)


def validate_trial_count(trial_count: int) -> None:
    if isinstance(trial_count, bool) or not isinstance(trial_count, int) or trial_count < 1:
        raise ValueError(f"trial_count must be a positive integer, got {trial_count!r}")


async def run_trials(
    media_set: MediaSet,
    trial_count: int,
    label: str,
    download: Callable[[MediaSet], Awaitable[Any]],
    clock: Callable[[], float] = perf_counter_ms,
) -> TrialResult:
    """Runs multiple trials and collects the aggregate measurement as well as the individual trial measurements.

    Each trial awaits `download(media_set)` to completion before the next one
    starts. `clock` returns a monotonic reading in milliseconds.

    Raises:
        ValueError: if `trial_count` is not a positive integer.
    """
    validate_trial_count(trial_count)

    logger.info("trials_started", label=label, trials=trial_count, media=len(media_set))

    per_trial = []
    all_trials_start = clock()
    for _ in range(trial_count):
        trial_start = clock()
        await download(media_set)
        trial_end = clock()
        per_trial.append(trial_end - trial_start)
    all_trials_end = clock()

    total = all_trials_end - all_trials_start
    result = TrialResult(
        total_duration_ms=total,
        per_trial_duration_ms=tuple(per_trial),
        average_ms=total / trial_count,
    )

    for index, duration in enumerate(result.per_trial_duration_ms):
        logger.debug("trial_measured", label=label, trial=index, duration_ms=duration)
    logger.info("trials_finished",
                label=label,
                total_ms=result.total_duration_ms,
                average_ms=result.average_ms)
    return result
