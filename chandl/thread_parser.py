"""Thread URL parsing and HTML link/title extraction."""
import logging
from dataclasses import dataclass
from typing import List, Union

from bs4 import BeautifulSoup, element as bs4_element
from bs4.builder import ParserRejectedMarkup

from .exceptions import ParseError

log = logging.getLogger('chandl')

# Used as the thread title when no subject node has any text. Existing
# download directories are named after it, so it must not change.
DEFAULT_TITLE = 'title'

# Subject candidates, in order: live thread subject, poster name, archive post title
TITLE_SELECTORS = ('.subject', '.name', '.post_title')


@dataclass
class ThreadURL:
    """Parsed thread URL information."""
    url: str
    board: str
    thread_id: str

    @classmethod
    def parse(cls, url: str) -> 'ThreadURL':
        """Parse a thread URL into components.

        Both live pages (https://boards.4chan.org/g/thread/123/slug) and
        archive mirrors (https://desuarchive.org/g/thread/123/) keep the
        board at index 3 and the thread id right after the `thread` segment.

        Args:
            url: The thread URL to parse.

        Returns:
            A ThreadURL instance with parsed components.
        """
        url = url.split('#')[0]
        parts = url.split('/')

        board = parts[3] if len(parts) > 3 else ''

        thread_id = ''
        if 'thread' in parts:
            index = parts.index('thread') + 1
            if index < len(parts):
                thread_id = parts[index]
        elif len(parts) > 5:
            thread_id = parts[5]

        return cls(url=url, board=board, thread_id=thread_id)


def parse_html(body: Union[str, bytes]) -> BeautifulSoup:
    """Parse a response body into a BeautifulSoup tree.

    Raises:
        ParseError: If the markup is rejected by the parser.
    """
    if isinstance(body, bytes):
        body = body.decode('utf-8', errors='replace')
    try:
        return BeautifulSoup(body, 'html.parser')
    except ParserRejectedMarkup as e:
        raise ParseError(f'Could not parse HTML: {e}') from e


def extract_links(body: Union[str, bytes]) -> List[str]:
    """Return the `href` of every anchor in the document, in page order.

    Args:
        body: The HTML document (str or bytes).

    Returns:
        The list of href values. Anchors without an href are skipped.
    """
    soup = parse_html(body)
    links = []
    for anchor in soup.find_all('a', href=True):
        if not isinstance(anchor, bs4_element.Tag):
            continue
        href = anchor.get('href')
        if isinstance(href, str):
            links.append(href)
    return links


def extract_title(body: Union[str, bytes]) -> str:
    """Return the thread title used for naming the download directory.

    Tries the thread subject, then the poster name, then the archive post
    title, and falls back to DEFAULT_TITLE.

    Args:
        body: The HTML document (str or bytes).

    Returns:
        The first non-empty title text found.
    """
    soup = parse_html(body)
    for selector in TITLE_SELECTORS:
        node = soup.select_one(selector)
        if node is None:
            continue
        text = node.get_text(strip=True)
        if text:
            return text
    log.debug('No subject found, using default title')
    return DEFAULT_TITLE
