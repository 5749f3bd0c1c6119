"""Configuration constants and settings for chandl."""
import os
from dataclasses import dataclass, field
from typing import Optional


# Name of the watch-list file, looked up in the working directory
REGISTRY_FILE_DEFAULT = 'threads.txt'

# Default configuration values
DEFAULT_REQUEST_TIMEOUT = 5.0  # seconds
DEFAULT_SEARCH_TIMEOUT = None  # iqdb is slow but eventually answers
DEFAULT_RETRY_DELAY = 1.0  # seconds
MIN_FILE_SIZE = 1000  # bytes; anything smaller is an error page or empty body


@dataclass(frozen=True)
class Config:
    """Configuration settings for the application.

    Set once at startup and passed to every component; never mutated.
    """
    workpath: str = field(default_factory=os.getcwd)
    registry_file: str = REGISTRY_FILE_DEFAULT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    search_timeout: Optional[float] = DEFAULT_SEARCH_TIMEOUT
    retry_delay: float = DEFAULT_RETRY_DELAY
    min_file_size: int = MIN_FILE_SIZE
    quiet: bool = False
    debug: bool = False
    numbered: bool = True

    @property
    def registry_path(self) -> str:
        """Absolute path of the watch-list file."""
        return os.path.join(self.workpath, self.registry_file)
