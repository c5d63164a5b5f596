"""
Point CDN media URLs at the S3 bucket that backs the CDN.
"""

from dataclasses import replace
from typing import Tuple

from .extractor import MediaSet

# Checked in order; only the first matching host is rewritten.
S3_HOST_REWRITES: Tuple[Tuple[str, str], ...] = (
    ('media.dev.rallyrd.com', 'share-media-applications-dev-rallyrd.s3.amazonaws.com'),
    ('media.staging.rallyrd.com', 'share-media-applications-staging-rallyrd.s3.amazonaws.com'),
    ('media.production.rallyrd.com', 'share-media-applications-production-rallyrd.s3.amazonaws.com'),
)


def rewrite_url(url: str) -> str:
    """Swap the first known CDN host in `url` for its S3 bucket host.

    URLs that do not contain any of the CDN hosts are returned unchanged.
    """
    for cdn_host, s3_host in S3_HOST_REWRITES:
        if cdn_host in url:
            return url.replace(cdn_host, s3_host, 1)
    return url


def transform_media_to_s3(media_set: MediaSet) -> MediaSet:
    """Converts each media URL from the CDN URL to the S3 URL.

    Works for the dev, staging and production environments. Returns a new
    MediaSet; the input is left as is.
    """
    return replace(
        media_set,
        banner=tuple(rewrite_url(url) for url in media_set.banner),
        carousel=tuple(rewrite_url(url) for url in media_set.carousel),
        hero=tuple(rewrite_url(url) for url in media_set.hero),
    )
