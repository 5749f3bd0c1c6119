import pytest

from chandl.config import Config
from chandl.exceptions import ThreadNotFoundError


def page(*hrefs, subject=None, name=None, post_title=None):
    """Build a minimal thread/search page with the given anchors."""
    parts = ['<html><body>']
    if subject is not None:
        parts.append(f'<span class="subject">{subject}</span>')
    if name is not None:
        parts.append(f'<span class="name">{name}</span>')
    if post_title is not None:
        parts.append(f'<h2 class="post_title">{post_title}</h2>')
    for href in hrefs:
        parts.append(f'<a href="{href}">link</a>')
    parts.append('</body></html>')
    return ''.join(parts).encode('utf-8')


class FakeHTTPClient:
    """Serves canned bodies; unknown URLs answer 404."""

    def __init__(self, pages=None, errors=None):
        self.pages = dict(pages or {})
        self.errors = dict(errors or {})
        self.requests = []

    def _get(self, url):
        self.requests.append(url)
        if url in self.errors:
            raise self.errors[url]
        if url not in self.pages:
            raise ThreadNotFoundError(f'Not found: {url}')
        return self.pages[url]

    def fetch(self, url):
        return self._get(url)

    def fetch_search(self, url):
        return self._get(url)

    def download(self, url, fileobj):
        data = self._get(url)
        fileobj.write(data)
        return len(data)


@pytest.fixture
def config(tmp_path):
    return Config(workpath=str(tmp_path), retry_delay=0)


@pytest.fixture
def fake_client():
    return FakeHTTPClient()
