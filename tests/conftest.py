from __future__ import annotations

import copy

import httpx
import pytest

from perftest.fetcher import HOME_ENDPOINT, HTTPFetcher

HOME_PAYLOAD = {
    "sections": {
        "banners": [
            {
                "items": [
                    {"content": {"image": {"link": "https://media.dev.rallyrd.com/banners/a.jpg"}}},
                    {"content": {"image": {"link": "https://media.dev.rallyrd.com/banners/unused.jpg"}}},
                ]
            },
            {"items": [{"content": {"image": {"link": "https://media.staging.rallyrd.com/banners/b.jpg"}}}]},
        ],
        "carouselsV2": [
            {"items": [{"assetId": "asset-2"}, {"assetId": "asset-1"}]},
        ],
        "hero_asset": {"id": "hero-1", "heroMedia": "https://media.production.rallyrd.com/hero.mp4"},
    },
    "data": {
        "assets": [
            {"id": "asset-1", "portalImage": "https://media.dev.rallyrd.com/assets/1.png"},
            {"id": "asset-2", "portalImage": "https://images.example.com/assets/2.png"},
        ]
    },
}


class FakeBackend:
    """Serves the home payload and every media URL through an httpx.MockTransport."""

    def __init__(self, payload: dict) -> None:
        self.payload = payload
        self.home_status = 200
        self.failing_hosts: set[str] = set()
        self.media_status = 200
        self.requests: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url == HOME_ENDPOINT:
            if self.home_status != 200:
                return httpx.Response(self.home_status)
            return httpx.Response(200, json=self.payload)
        if request.url.host in self.failing_hosts:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(
            self.media_status,
            content=b"\x89PNG\r\n",
            headers={"content-type": "image/png"},
        )

    def fetcher(self) -> HTTPFetcher:
        return HTTPFetcher(transport=httpx.MockTransport(self.handler))

    @property
    def media_requests(self) -> list[str]:
        return [url for url in self.requests if url != HOME_ENDPOINT]


@pytest.fixture
def home_payload() -> dict:
    return copy.deepcopy(HOME_PAYLOAD)


@pytest.fixture
def backend(home_payload: dict) -> FakeBackend:
    return FakeBackend(home_payload)
