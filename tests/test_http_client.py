import io
import urllib.error

import pytest

from chandl.config import Config
from chandl.exceptions import HTTPStatusError, InvalidURLError, ThreadNotFoundError, UnreachableError
from chandl.http_client import HTTPClient


class FakeOpener:
    """Stands in for urllib.request.urlopen, replaying a list of results."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def __call__(self, req, timeout=None):
        self.calls.append((req, timeout))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return io.BytesIO(result)


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr('time.sleep', calls.append)
    return calls


def http_error(code):
    return urllib.error.HTTPError('https://x.example/', code, 'error', {}, None)


def test_fetch_returns_body_and_sends_user_agent(monkeypatch, sleeps):
    opener = FakeOpener(b'<html></html>')
    monkeypatch.setattr('urllib.request.urlopen', opener)

    client = HTTPClient(Config(request_timeout=3.0))
    assert client.fetch('//boards.4chan.org/g/thread/1') == b'<html></html>'

    req, timeout = opener.calls[0]
    assert req.full_url == 'https://boards.4chan.org/g/thread/1'
    assert req.get_header('User-agent') == HTTPClient.USER_AGENT
    assert timeout == 3.0
    assert sleeps == []


def test_fetch_retries_once_on_connection_failure(monkeypatch, sleeps):
    opener = FakeOpener(urllib.error.URLError('reset'), b'ok')
    monkeypatch.setattr('urllib.request.urlopen', opener)

    assert HTTPClient(Config(retry_delay=1.0)).fetch('https://x.example/') == b'ok'
    assert len(opener.calls) == 2
    assert sleeps == [1.0]


def test_fetch_gives_up_after_second_failure(monkeypatch, sleeps):
    opener = FakeOpener(urllib.error.URLError('dns'), urllib.error.URLError('dns'))
    monkeypatch.setattr('urllib.request.urlopen', opener)

    with pytest.raises(UnreachableError):
        HTTPClient().fetch('https://x.example/')
    assert len(opener.calls) == 2


def test_fetch_does_not_retry_http_status(monkeypatch, sleeps):
    opener = FakeOpener(http_error(503))
    monkeypatch.setattr('urllib.request.urlopen', opener)

    with pytest.raises(HTTPStatusError) as excinfo:
        HTTPClient().fetch('https://x.example/')
    assert excinfo.value.code == 503
    assert len(opener.calls) == 1
    assert sleeps == []


def test_fetch_404_is_thread_not_found(monkeypatch, sleeps):
    monkeypatch.setattr('urllib.request.urlopen', FakeOpener(http_error(404)))

    with pytest.raises(ThreadNotFoundError):
        HTTPClient().fetch('https://x.example/')


def test_fetch_search_has_no_timeout(monkeypatch, sleeps):
    opener = FakeOpener(b'results')
    monkeypatch.setattr('urllib.request.urlopen', opener)

    assert HTTPClient().fetch_search('https://iqdb.org/?url=x') == b'results'
    assert opener.calls[0][1] is None


def test_download_streams_without_retry(monkeypatch, sleeps):
    opener = FakeOpener(b'x' * 2048)
    monkeypatch.setattr('urllib.request.urlopen', opener)

    out = io.BytesIO()
    assert HTTPClient().download('https://i.4cdn.org/g/1.jpg', out) == 2048
    assert out.getvalue() == b'x' * 2048

    monkeypatch.setattr('urllib.request.urlopen', FakeOpener(urllib.error.URLError('reset'), b'never'))
    with pytest.raises(UnreachableError):
        HTTPClient().download('https://i.4cdn.org/g/1.jpg', io.BytesIO())
    assert sleeps == []


def test_non_ascii_link_is_percent_encoded(monkeypatch, sleeps):
    opener = FakeOpener(b'x' * 2048)
    monkeypatch.setattr('urllib.request.urlopen', opener)

    HTTPClient().download('https://i.example/g/äbc.jpg?a=1&b=%20', io.BytesIO())

    assert opener.calls[0][0].full_url == 'https://i.example/g/%C3%A4bc.jpg?a=1&b=%20'


def test_invalid_url_is_not_retried(monkeypatch, sleeps):
    opener = FakeOpener(ValueError('unknown url type'), b'never')
    monkeypatch.setattr('urllib.request.urlopen', opener)

    with pytest.raises(InvalidURLError):
        HTTPClient().fetch('https://x.example/')
    assert len(opener.calls) == 1
    assert sleeps == []


def test_http_error_response_is_closed(monkeypatch, sleeps):
    error = http_error(500)
    closed = []
    monkeypatch.setattr(error, 'close', lambda: closed.append(True))
    monkeypatch.setattr('urllib.request.urlopen', FakeOpener(error))

    with pytest.raises(HTTPStatusError):
        HTTPClient().fetch('https://x.example/')
    assert closed == [True]
