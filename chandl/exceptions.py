"""Custom exception classes for chandl."""


class ChandlError(Exception):
    """Base exception for all chandl errors."""
    pass


class FetchError(ChandlError):
    """Raised when a page or file cannot be fetched."""
    pass


class UnreachableError(FetchError):
    """Raised when no response was received at all (network, DNS, TLS)."""
    pass


class ParseError(UnreachableError):
    """Raised when a response body cannot be parsed as HTML."""
    pass


class InvalidURLError(FetchError):
    """Raised when a link cannot be turned into a request. Never retried."""
    pass


class HTTPStatusError(FetchError):
    """Raised when the server answers with an error status."""

    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.code = code


class ThreadNotFoundError(HTTPStatusError):
    """Raised when a page answers 404 (thread archived or removed)."""

    def __init__(self, message: str, code: int = 404):
        super().__init__(message, code)


class ReverseSearchError(ChandlError):
    """Raised when iqdb could not produce a downloadable link."""
    pass


class AggregatorMissError(ReverseSearchError):
    """Raised when iqdb has no match for a thumbnail."""
    pass


class AggregatorNoLinkError(ReverseSearchError):
    """Raised when iqdb matched but no matched page links to an image."""
    pass


class DownloadError(ChandlError):
    """Raised when a file download fails."""
    pass
