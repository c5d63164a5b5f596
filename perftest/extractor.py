"""
Pull the media URLs out of the client-screens/home payload.

Banner images come straight from the banner section, carousel images are
resolved through the flat `data.assets` catalog, and the hero image is read
from `sections.hero_asset` directly (the hero asset is not part of the catalog
yet, so it is not resolved through it).
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

import structlog

from .errors import ExtractionError, MissingAssetError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class MediaSet:
    banner: Tuple[str, ...] = ()
    carousel: Tuple[str, ...] = ()
    hero: Tuple[str, ...] = ()

    def urls(self) -> Iterator[str]:
        """Yield every URL, banner first, then carousel, then hero."""
        yield from self.banner
        yield from self.carousel
        yield from self.hero

    def __len__(self) -> int:
        return len(self.banner) + len(self.carousel) + len(self.hero)

    def as_dict(self) -> Dict[str, List[str]]:
        return {
            'bannerMedia': list(self.banner),
            'carouselMedia': list(self.carousel),
            'heroMedia': list(self.hero),
        }


class AssetCatalog:
    """Assets from `data.assets`, keyed by id."""

    def __init__(self, assets: Dict[Any, Dict[str, Any]]):
        self._assets = assets

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'AssetCatalog':
        assets = _dig(payload, ('data', 'assets'), '')
        if not isinstance(assets, list):
            raise ExtractionError('data.assets', f"expected a list, got {type(assets).__name__}")

        by_id = {}
        for index, asset in enumerate(assets):
            asset_id = _child(asset, 'id', f'data.assets[{index}].id')
            # duplicate ids: the first one wins
            by_id.setdefault(asset_id, asset)
        return cls(by_id)

    def get(self, asset_id) -> Optional[Dict[str, Any]]:
        return self._assets.get(asset_id)

    def require(self, asset_id) -> Dict[str, Any]:
        asset = self.get(asset_id)
        if asset is None:
            raise MissingAssetError(asset_id)
        return asset

    def __len__(self) -> int:
        return len(self._assets)


def _child(node: Any, key, path: str) -> Any:
    """Index into a dict or list, raising ExtractionError naming `path` on failure."""
    if isinstance(key, int):
        if not isinstance(node, list) or not -len(node) <= key < len(node):
            raise ExtractionError(path, "missing list element")
        return node[key]
    if not isinstance(node, dict):
        raise ExtractionError(path, f"expected an object, got {type(node).__name__}")
    if key not in node:
        raise ExtractionError(path, "missing key")
    return node[key]


def _section_list(sections: Dict[str, Any], key: str) -> List[Any]:
    value = sections.get(key)
    if not value:
        return []
    if not isinstance(value, list):
        raise ExtractionError(f'sections.{key}', f"expected a list, got {type(value).__name__}")
    return value


def _url(node: Any, key: str, path: str) -> str:
    """A media URL leaf; anything but a string is a structural failure."""
    value = _child(node, key, path)
    if not isinstance(value, str):
        raise ExtractionError(path, f"expected a string, got {type(value).__name__}")
    return value


def _dig(node: Any, keys: Tuple, path: str) -> Any:
    for key in keys:
        if isinstance(key, int):
            path = f'{path}[{key}]'
        else:
            path = f'{path}.{key}' if path else key
        node = _child(node, key, path)
    return node


def extract_banner_media(sections: Dict[str, Any]) -> List[str]:
    """Image link of the first item of every banner."""
    return [
        _url(
            _dig(banner, ('items', 0, 'content', 'image'), f'sections.banners[{i}]'),
            'link', f'sections.banners[{i}].items[0].content.image.link')
        for i, banner in enumerate(_section_list(sections, 'banners'))
    ]


def extract_carousel_media(payload: Dict[str, Any], sections: Dict[str, Any]) -> List[str]:
    carousels = _section_list(sections, 'carouselsV2')
    catalog = None
    media = []
    for i, carousel in enumerate(carousels):
        items = _child(carousel, 'items', f'sections.carouselsV2[{i}].items')
        if not isinstance(items, list):
            raise ExtractionError(f'sections.carouselsV2[{i}].items', "expected a list")
        for j, item in enumerate(items):
            if catalog is None:
                catalog = AssetCatalog.from_payload(payload)
            asset_id = _child(item, 'assetId', f'sections.carouselsV2[{i}].items[{j}].assetId')
            asset = catalog.require(asset_id)
            media.append(_url(asset, 'portalImage', f'data.assets[id={asset_id!r}].portalImage'))
    return media


def extract_hero_media(sections: Dict[str, Any]) -> List[str]:
    hero = sections.get('hero_asset')
    if not isinstance(hero, dict) or not hero.get('id'):
        return []
    return [_url(hero, 'heroMedia', 'sections.hero_asset.heroMedia')]


def extract_media(payload: Dict[str, Any]) -> MediaSet:
    """Extract the banner, carousel and hero media URLs from a home payload.

    Raises:
        ExtractionError: an expected substructure is missing or has the wrong type.
        MissingAssetError: a carousel item references an asset not in `data.assets`.
    """
    sections = _child(payload, 'sections', 'sections')
    if not isinstance(sections, dict):
        raise ExtractionError('sections', f"expected an object, got {type(sections).__name__}")

    media_set = MediaSet(
        banner=tuple(extract_banner_media(sections)),
        carousel=tuple(extract_carousel_media(payload, sections)),
        hero=tuple(extract_hero_media(sections)),
    )
    logger.debug("media_extracted",
                 banner=len(media_set.banner),
                 carousel=len(media_set.carousel),
                 hero=len(media_set.hero))
    return media_set
