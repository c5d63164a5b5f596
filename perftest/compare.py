"""
Compare a baseline trial run (CDN) against a candidate trial run (S3).

Every comparison is made per metric: the total of all trials, each pair of
trials with the same index, and the average. Percentages use the candidate as
the denominator for the time reduction and the baseline for the performance
increase, so the two are deliberately not mirror images of each other.

Division by zero follows IEEE semantics instead of raising: 0/0 is NaN and
x/0 is an infinity carrying the combined sign.
"""

import math
from typing import Callable, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .trials import TrialResult


class MetricComparison(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, ser_json_inf_nan='constants')

    all_trials: float = Field(alias='allTrials')
    trials: Tuple[float, ...]
    average: float


class ComparisonReport(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, ser_json_inf_nan='constants')

    diffs: MetricComparison
    time_reduction_percent: MetricComparison = Field(alias='timeReductionPercent')
    performance_increase_percent: MetricComparison = Field(alias='performanceIncreasePercent')
    faster_by_multiple: MetricComparison = Field(alias='fasterByMultiple')


def _divide(numerator: float, denominator: float) -> float:
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def diff(baseline: float, candidate: float) -> float:
    return candidate - baseline


def reduction_percent(baseline: float, candidate: float) -> float:
    return _divide(candidate - baseline, candidate) * 100


def increase_percent(baseline: float, candidate: float) -> float:
    return _divide(candidate - baseline, baseline) * 100


def speed_multiple(baseline: float, candidate: float) -> float:
    return _divide(candidate, baseline)


def _compare_metric(
    fn: Callable[[float, float], float],
    baseline: TrialResult,
    candidate: TrialResult,
) -> MetricComparison:
    return MetricComparison(
        all_trials=fn(baseline.total_duration_ms, candidate.total_duration_ms),
        trials=tuple(
            fn(b, c) for b, c in zip(baseline.per_trial_duration_ms, candidate.per_trial_duration_ms)
        ),
        average=fn(baseline.average_ms, candidate.average_ms),
    )


def compare(baseline: TrialResult, candidate: TrialResult) -> ComparisonReport:
    """Build the comparison report of `candidate` relative to `baseline`.

    Raises:
        ValueError: if the two runs have a different number of trials.
    """
    if baseline.trial_count != candidate.trial_count:
        raise ValueError(
            f"cannot compare {baseline.trial_count} baseline trials "
            f"with {candidate.trial_count} candidate trials"
        )

    return ComparisonReport(
        diffs=_compare_metric(diff, baseline, candidate),
        time_reduction_percent=_compare_metric(reduction_percent, baseline, candidate),
        performance_increase_percent=_compare_metric(increase_percent, baseline, candidate),
        faster_by_multiple=_compare_metric(speed_multiple, baseline, candidate),
    )
