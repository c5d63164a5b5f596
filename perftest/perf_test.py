"""
Runs the CDN vs. S3 download comparison end to end:
fetch home payload -> extract media -> CDN trials -> rewrite to S3 -> S3 trials -> compare.
"""

from functools import partial

import structlog
from pydantic import BaseModel, ConfigDict

from .compare import ComparisonReport, compare
from .downloader import fetch_all_media
from .extractor import extract_media
from .fetcher import HTTPFetcher, request_backend_home
from .rewriter import transform_media_to_s3
from .trials import NUM_TRIAL_RUNS, TrialResult, run_trials, validate_trial_count

logger = structlog.get_logger(__name__)

COMPLETED_MESSAGE = 'Test Completed!'


class PerfTestSummary(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_inf_nan='constants')

    cdn: TrialResult
    s3: TrialResult
    comparisons: ComparisonReport


class PerfTestOutcome(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_inf_nan='constants')

    message: str
    data: PerfTestSummary

    def to_json(self, indent: int = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


async def run_perf_test(fetcher: HTTPFetcher = None, trial_count: int = NUM_TRIAL_RUNS) -> PerfTestOutcome:
    """Run the whole comparison once.

    If no fetcher is given one is created for the run and closed afterwards.
    Any error (TransportError, ExtractionError, ValueError) propagates; no
    partial report is produced.
    """
    if fetcher is None:
        async with HTTPFetcher() as owned_fetcher:
            return await _run(owned_fetcher, trial_count)
    return await _run(fetcher, trial_count)


async def _run(fetcher: HTTPFetcher, trial_count: int) -> PerfTestOutcome:
    validate_trial_count(trial_count)
    logger.info("testing_started", trials=trial_count)

    home_data = await request_backend_home(fetcher)

    download = partial(fetch_all_media, fetcher)

    logger.info("testing_cdn")
    media_set = extract_media(home_data)
    logger.info("cdn_media_set", **media_set.as_dict())
    cdn_measures = await run_trials(media_set, trial_count, 'CDN', download)

    logger.info("testing_s3")
    s3_media_set = transform_media_to_s3(media_set)
    logger.info("s3_media_set", **s3_media_set.as_dict())
    s3_measures = await run_trials(s3_media_set, trial_count, 'S3', download)

    summary = PerfTestSummary(
        cdn=cdn_measures,
        s3=s3_measures,
        comparisons=compare(cdn_measures, s3_measures),
    )
    logger.info("testing_ended",
                cdn_average_ms=cdn_measures.average_ms,
                s3_average_ms=s3_measures.average_ms,
                faster_by_multiple=summary.comparisons.faster_by_multiple.average)
    return PerfTestOutcome(message=COMPLETED_MESSAGE, data=summary)
