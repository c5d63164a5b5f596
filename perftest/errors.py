"""
Exceptions raised by the perf test. Everything derives from PerfTestError.
"""


class PerfTestError(Exception):
    """Base class for perf test failures."""


class TransportError(PerfTestError):
    """The home payload could not be retrieved (network failure or non-2xx)."""

    def __init__(self, url: str, status_code: int = 0, reason: str = None):
        self.url = url
        self.status_code = status_code
        self.reason = reason or ""
        super().__init__(
            f"Request to {url} failed with status {status_code}, message '{self.reason}'"
        )


class ExtractionError(PerfTestError):
    """The home payload is missing a substructure the extractor relies on."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class MissingAssetError(ExtractionError, LookupError):
    """A carousel item references an asset id that is not in data.assets."""

    def __init__(self, asset_id, path: str = "data.assets"):
        self.asset_id = asset_id
        super().__init__(path, f"asset {asset_id!r} not found in catalog")
