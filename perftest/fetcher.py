import time
from typing import Any, Dict

import httpx
import structlog

from .config import config
from .errors import TransportError

logger = structlog.get_logger(__name__)

HOME_ENDPOINT = 'https://api.dev.rallyrd.com/api/client-screens/home'


class FetchResult:
    def __init__(
        self,
        url: str,
        status_code: int,
        size: int = 0,
        final_url: str = None,
        fetch_time: float = 0.0,
        error: str = None,
        content_type: str = None
    ):
        """Initialize a FetchResult with the response status and timing metadata."""
        self.url = url
        self.status_code = status_code
        self.size = size
        self.final_url = final_url or url
        self.fetch_time = fetch_time
        self.error = error
        self.content_type = content_type

    @property
    def success(self) -> bool:
        """Check if the fetch was successful (no error and 2xx status code)."""
        return self.error is None and 200 <= self.status_code < 300


class HTTPFetcher:
    def __init__(self, settings: Dict[str, Any] = None, transport: httpx.AsyncBaseTransport = None):
        """Initialize the HTTP fetcher from the fetcher config section.

        Args:
            settings: Overrides for the `fetcher` config section.
            transport: Optional httpx transport, used by tests to avoid the network.
        """
        settings = {**config.fetcher, **(settings or {})}
        self.user_agent = settings.get('user_agent', 'RallyRdPerfTest/1.0')
        self.timeout = float(settings.get('timeout', 30.0))
        self.max_redirects = int(settings.get('max_redirects', 5))

        headers = {
            'User-Agent': self.user_agent,
            'Accept': '*/*',
            'Accept-Encoding': 'gzip, deflate',
            'Connection': 'keep-alive',
        }
        # Batches are never throttled: no cap on concurrent connections.
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            max_redirects=self.max_redirects,
            headers=headers,
            limits=httpx.Limits(max_connections=None, max_keepalive_connections=20),
            transport=transport
        )

    async def __aenter__(self) -> 'HTTPFetcher':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def close(self):
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def fetch(self, url: str) -> FetchResult:
        """Fetch a URL and return a FetchResult. Transport errors are reported, not raised."""
        start_time = time.time()

        try:
            response = await self._client.get(url)
            return FetchResult(
                url=url,
                status_code=response.status_code,
                size=len(response.content),
                final_url=str(response.url),
                fetch_time=time.time() - start_time,
                content_type=response.headers.get('content-type', '').lower()
            )

        except httpx.TimeoutException as e:
            error = f"Timeout after {self.timeout}s: {str(e)}"
            logger.warning("fetch_timeout", url=url, error=error)

        except httpx.ConnectError as e:
            error = f"Connection error: {str(e)}"
            logger.warning("fetch_connect_error", url=url, error=error)

        except httpx.HTTPError as e:
            error = f"Unexpected error: {str(e)}"
            logger.error("fetch_error", url=url, error=error)

        return FetchResult(
            url=url,
            status_code=0,
            fetch_time=time.time() - start_time,
            error=error
        )

    async def fetch_json(self, url: str) -> Any:
        """GET a URL and decode its JSON body.

        Raises:
            TransportError: on network failure, non-2xx status or an undecodable body.
        """
        try:
            response = await self._client.get(url)
        except httpx.HTTPError as e:
            logger.error("json_request_failed", url=url, error=str(e))
            raise TransportError(url, 0, str(e)) from e

        if not response.is_success:
            logger.error("json_request_rejected", url=url, status_code=response.status_code)
            raise TransportError(url, response.status_code, response.reason_phrase)

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(url, response.status_code, f"Invalid JSON body: {e}") from e


async def request_backend_home(fetcher: HTTPFetcher) -> Any:
    """Returns the data of the api/client-screens/home endpoint."""
    return await fetcher.fetch_json(HOME_ENDPOINT)
