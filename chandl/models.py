"""Data models shared by the download pipeline."""
import enum
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class DownloadRequest:
    """What the command line asks for on `download`."""
    url: str
    directory: Optional[str] = None
    name: Optional[str] = None
    iqdb: bool = False
    override: bool = False
    stamp_mtime: bool = False


@dataclass(frozen=True)
class ThreadTarget:
    """One thread to scrape, fixed for the duration of a pass."""
    source_url: str
    directory_name: Optional[str] = None
    display_name: Optional[str] = None
    use_reverse_search: bool = False
    override_existing: bool = False
    stamp_mtime: bool = False
    print_existing: bool = True

    @classmethod
    def from_request(cls, request: DownloadRequest) -> 'ThreadTarget':
        return cls(
            source_url=request.url,
            directory_name=request.directory,
            display_name=request.name,
            use_reverse_search=request.iqdb,
            override_existing=request.override,
            stamp_mtime=request.stamp_mtime,
        )


@dataclass
class ImageTask:
    """One image of a thread to resolve and save."""
    origin_link: str
    computed_filename: str
    sequence_number: int
    fallback_candidates: List[str] = field(default_factory=list)


class Outcome(enum.Enum):
    ALREADY_EXISTS = 'already_exists'
    DOWNLOADED = 'downloaded'
    AGGREGATOR_MISS = 'aggregator_miss'
    AGGREGATOR_NO_LINK = 'aggregator_no_link'
    FETCH_FAILED = 'fetch_failed'


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of materializing one ImageTask."""
    kind: Outcome
    path: Optional[str] = None

    @property
    def has_file(self) -> bool:
        """True when a file for the image is on disk."""
        return self.kind in (Outcome.ALREADY_EXISTS, Outcome.DOWNLOADED)


@dataclass(frozen=True)
class RegistryEntry:
    """A watched thread: its URL and the name shown for it."""
    url: str
    name: str


@dataclass
class ThreadSummary:
    """Counts of outcomes for one scraped thread."""
    directory: str
    outcomes: List[ResolutionOutcome] = field(default_factory=list)

    def count(self, kind: Outcome) -> int:
        return sum(1 for outcome in self.outcomes if outcome.kind is kind)
