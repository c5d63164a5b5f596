"""
Download every media URL of a MediaSet at once and wait for all of them.
"""

import asyncio
from dataclasses import dataclass

import structlog

from .extractor import MediaSet
from .fetcher import FetchResult, HTTPFetcher

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BatchResult:
    requested: int
    failed: int

    @property
    def succeeded(self) -> int:
        return self.requested - self.failed


async def fetch_all_media(fetcher: HTTPFetcher, media_set: MediaSet) -> BatchResult:
    """Issue one GET per URL concurrently and return once every request has settled.

    A failed request never aborts the batch; failures are only counted.
    """
    fetches = [fetcher.fetch(url) for url in media_set.urls()]
    results = await asyncio.gather(*fetches, return_exceptions=True)

    failed = 0
    for url, result in zip(media_set.urls(), results):
        if isinstance(result, FetchResult):
            if result.success:
                continue
            reason = result.error or f"HTTP {result.status_code}"
            final_url = result.final_url
        else:
            reason = repr(result)
            final_url = url
        failed += 1
        logger.debug("media_fetch_failed", url=url, final_url=final_url, reason=reason)

    if failed:
        logger.warning("batch_had_failures", requested=len(results), failed=failed)
    return BatchResult(requested=len(results), failed=failed)
