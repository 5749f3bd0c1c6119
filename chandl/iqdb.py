"""Reverse image search through iqdb for threads that only carry thumbnails."""
import logging
from typing import List, Optional
from urllib.parse import urlencode

from . import links
from .exceptions import AggregatorMissError, AggregatorNoLinkError, FetchError
from .http_client import HTTPClient
from .thread_parser import extract_links

log = logging.getLogger('chandl')

SEARCH_URL = 'https://iqdb.org/'

# Marks the end of the result list; everything after it is page footer
END_OF_RESULTS = '#'

# iqdb answers "no relevant matches" with a link to a saucenao search
NO_RESULTS_MARKER = 'saucenao.com/search.php'


def search_url(seed: str) -> str:
    return SEARCH_URL + '?' + urlencode({'url': seed})


def result_links(hrefs: List[str]) -> List[str]:
    """Turn the anchors of an iqdb result page into match page links.

    Args:
        hrefs: Every href of the result page, in order.

    Returns:
        The matched pages, or an empty list when iqdb found nothing.
    """
    if END_OF_RESULTS in hrefs:
        hrefs = hrefs[:hrefs.index(END_OF_RESULTS)]
    # The first link points back at the iqdb front page
    candidates = [links.normalize(href) for href in hrefs[1:]]
    if candidates and NO_RESULTS_MARKER in candidates[0]:
        return []
    return candidates


class IqdbResolver:
    """Finds full-size images for a thumbnail through iqdb matches."""

    def __init__(self, http_client: Optional[HTTPClient] = None):
        self.http_client = http_client or HTTPClient()

    def search(self, seed: str) -> List[str]:
        """Return the match pages iqdb lists for `seed`.

        Raises:
            FetchError: If iqdb itself cannot be fetched.
        """
        url = search_url(seed)
        log.debug(f'Searching iqdb: {url}')
        body = self.http_client.fetch_search(url)
        return result_links(extract_links(body))

    def resolve(self, seed: str) -> List[str]:
        """Collect downloadable image links for one thumbnail.

        Every match page is fetched and its media links are pooled in order.
        A match page that cannot be fetched is skipped.

        Args:
            seed: The thumbnail URL.

        Returns:
            The pooled image links, best match first.

        Raises:
            AggregatorMissError: If iqdb lists no match.
            AggregatorNoLinkError: If no match page links to an image.
            FetchError: If iqdb itself cannot be fetched.
        """
        candidates = self.search(seed)
        if not candidates:
            raise AggregatorMissError(f'No iqdb match for {seed}')

        pooled: List[str] = []
        for candidate in candidates:
            try:
                hrefs = extract_links(self.http_client.fetch(candidate))
            except FetchError as e:
                log.debug(f'Skipping iqdb match {candidate}: {e}')
                continue
            found = links.media_links(hrefs, candidate)
            log.debug(f'{len(found)} image link(s) on {candidate}')
            pooled.extend(found)

        pooled = links.unique(pooled)
        if not pooled:
            raise AggregatorNoLinkError(
                f'iqdb matched {len(candidates)} page(s) for {seed} but none links to an image'
            )
        return pooled
