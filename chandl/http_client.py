"""HTTP client for fetching thread pages, search results and files."""
import http.client
import logging
import shutil
import time
import urllib.error
import urllib.parse
import urllib.request
from typing import BinaryIO, Dict, Optional

from .config import Config
from .exceptions import HTTPStatusError, InvalidURLError, ThreadNotFoundError, UnreachableError

log = logging.getLogger('chandl')

# Failures where the server never produced a usable response
CONNECTION_ERRORS = (OSError, http.client.HTTPException)

# Reserved URL characters plus '%', so already-escaped links pass unchanged
URL_SAFE_CHARS = ":/?#[]@!$&'()*+,;=%~"


class HTTPClient:
    """Handles HTTP requests for pages and file downloads."""

    USER_AGENT = 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.6 Safari/605.1.15'

    def __init__(self, config: Optional[Config] = None):
        """Initialize the HTTP client.

        Args:
            config: Configuration settings. If None, defaults are used.
        """
        self.config = config or Config()

    def _build_headers(self, url: str) -> Dict[str, str]:
        """Build HTTP headers for a request.

        Args:
            url: The URL to fetch.

        Returns:
            A dictionary of HTTP headers.
        """
        parsed = urllib.parse.urlparse(url)
        path_parts = parsed.path.strip('/').split('/')
        referer = f'{parsed.scheme}://{parsed.netloc}/{path_parts[0]}' if path_parts else url

        return {
            'User-Agent': self.USER_AGENT,
            'Accept-Language': 'en-US,en;q=0.5',
            'Referer': referer,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        }

    def _open(self, url: str, timeout: Optional[float]):
        """Open `url` and translate urllib failures into chandl errors.

        Non-ASCII characters are percent-encoded; existing escapes are kept.

        Raises:
            ThreadNotFoundError: If the response is 404.
            HTTPStatusError: For any other error status.
            UnreachableError: If no response was received.
            InvalidURLError: If `url` cannot be requested at all.
        """
        if url.startswith('//'):
            url = 'https:' + url
        url = urllib.parse.quote(url, safe=URL_SAFE_CHARS)

        try:
            req = urllib.request.Request(url, headers=self._build_headers(url))
            return urllib.request.urlopen(req, timeout=timeout)
        except urllib.error.HTTPError as e:
            e.close()
            if e.code == 404:
                raise ThreadNotFoundError(f'Not found: {url}') from e
            raise HTTPStatusError(f'HTTP error {e.code} for {url}', e.code) from e
        except CONNECTION_ERRORS as e:
            raise UnreachableError(f'Could not reach {url}: {e}') from e
        except ValueError as e:
            raise InvalidURLError(f'Invalid URL {url}: {e}') from e

    def _read(self, url: str, timeout: Optional[float]) -> bytes:
        with self._open(url, timeout) as response:
            try:
                return response.read()
            except CONNECTION_ERRORS as e:
                raise UnreachableError(f'Connection to {url} dropped: {e}') from e

    def _read_with_retry(self, url: str, timeout: Optional[float]) -> bytes:
        try:
            return self._read(url, timeout)
        except UnreachableError as e:
            log.warning(f'{e}; retrying in {self.config.retry_delay:g}s')
            time.sleep(self.config.retry_delay)
        return self._read(url, timeout)

    def fetch(self, url: str) -> bytes:
        """Perform an HTTP GET and return the raw bytes of the response.

        A Request object is used with common headers (User-Agent, Referer,
        Accept-Language) to mimic a modern browser and avoid basic anti-bot
        measures. A connection-level failure is retried once after
        `retry_delay` seconds; error statuses are raised immediately.

        Args:
            url: The URL to fetch.

        Returns:
            The raw content of the response.

        Raises:
            ThreadNotFoundError: If the response is 404.
            HTTPStatusError: If the server answered with another error status.
            UnreachableError: If both attempts failed to get a response.
        """
        return self._read_with_retry(url, self.config.request_timeout)

    def fetch_search(self, url: str) -> bytes:
        """Fetch an iqdb result page using the (usually unbounded) search timeout."""
        return self._read_with_retry(url, self.config.search_timeout)

    def download(self, url: str, fileobj: BinaryIO) -> int:
        """Stream the body of `url` into `fileobj`.

        The final download is attempted exactly once.

        Args:
            url: The file URL.
            fileobj: A binary file object opened for writing.

        Returns:
            The number of bytes written.

        Raises:
            FetchError: If the request fails or the stream is cut short.
        """
        with self._open(url, self.config.request_timeout) as response:
            start = fileobj.tell()
            try:
                shutil.copyfileobj(response, fileobj)
            except CONNECTION_ERRORS as e:
                raise UnreachableError(f'Download of {url} interrupted: {e}') from e
            return fileobj.tell() - start
