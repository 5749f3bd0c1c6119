"""Classification and normalization of scraped links.

Every function here is a pure function of the href string, so the same link
always lands in the same class no matter which page it was found on.
"""
import enum
from typing import Iterable, List, Optional, TypeVar
from urllib.parse import urljoin

MEDIA_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webm')

# Redirect/tracking parameter used by search result pages; never a media link
REDIRECT_MARKER = 'url='

THUMBNAIL_MARKER = '/thumb/'

T = TypeVar('T')


class LinkKind(enum.Enum):
    FULL_IMAGE = 'full'
    THUMBNAIL = 'thumbnail'
    IRRELEVANT = 'irrelevant'


def is_media(href: str) -> bool:
    """True if `href` ends with a supported extension and is not a redirect."""
    return href.endswith(MEDIA_EXTENSIONS) and REDIRECT_MARKER not in href


def is_thumbnail(href: str) -> bool:
    return THUMBNAIL_MARKER in href


def classify(href: str) -> LinkKind:
    if is_thumbnail(href):
        return LinkKind.THUMBNAIL
    if is_media(href):
        return LinkKind.FULL_IMAGE
    return LinkKind.IRRELEVANT


def normalize(href: str) -> str:
    """Rewrite scheme-relative links (`//host/...`) to https."""
    if href.startswith('//'):
        return 'https:' + href
    return href


def absolutize(href: str, base_url: str) -> str:
    """Normalize `href` and resolve it against the page it was found on."""
    return urljoin(base_url, normalize(href))


def unique(items: Iterable[T]) -> List[T]:
    """Drop repeated items, keeping the first occurrence of each in order."""
    return list(dict.fromkeys(items))


def thumbnail_seed(href: str) -> Optional[str]:
    """Recover the embedded source URL of a thumbnail link.

    Thumbnail hrefs carry the image URL inline (for example as the `url`
    parameter of a search link), so the seed is everything from the last
    `http` onwards. Returns None when the href embeds no URL.
    """
    index = href.rfind('http')
    if index < 0:
        return None
    return href[index:]


def image_links(hrefs: Iterable[str], base_url: str = '') -> List[str]:
    """Full-resolution media links of a thread page, deduplicated in page order."""
    return unique(
        absolutize(href, base_url) for href in hrefs
        if classify(href) is LinkKind.FULL_IMAGE
    )


def media_links(hrefs: Iterable[str], base_url: str = '') -> List[str]:
    """Media links of any resolution, deduplicated in page order."""
    return unique(absolutize(href, base_url) for href in hrefs if is_media(href))


def seed_links(hrefs: Iterable[str]) -> List[str]:
    """Reverse-search seeds taken from the thumbnail links of a thread page."""
    seeds = []
    for href in hrefs:
        if classify(href) is not LinkKind.THUMBNAIL:
            continue
        seed = thumbnail_seed(href)
        if seed is not None:
            seeds.append(seed)
    return unique(seeds)
