"""File operations and naming utilities."""
import os
import re
import tempfile
from contextlib import contextmanager
from typing import Iterator, List, Optional
from urllib.parse import urlparse

TEMP_SUFFIX = '.part'


class FileManager:
    """Manages file operations and naming."""

    @staticmethod
    def sanitize_dirname(s: str) -> str:
        """Make a thread title usable as a single directory name.

        Only path separators and NUL are removed so that names match the
        directories of earlier runs.

        Args:
            s: The string to sanitize.

        Returns:
            The sanitized name.
        """
        s = re.sub(r'[/\\\x00]', '', str(s)).strip()
        if not s:
            s = 'thread'
        return s

    @staticmethod
    def basename_from_url(url: str) -> str:
        """Return the last non-empty path segment of `url`."""
        path = urlparse(url).path or url
        segments = [segment for segment in path.split('/') if segment]
        return segments[-1] if segments else ''

    @staticmethod
    def extension_from_url(url: str) -> str:
        """Return the text after the last dot of `url`, without the dot."""
        return url.rsplit('.', 1)[-1]

    @staticmethod
    def ensure_directory(directory: str) -> None:
        """Ensure a directory exists, creating it if necessary.

        Args:
            directory: The directory path to ensure exists.
        """
        if not os.path.exists(directory):
            os.makedirs(directory)

    @staticmethod
    def list_files(directory: str) -> List[str]:
        """Names of finished files in `directory` (temporary files excluded)."""
        if not os.path.isdir(directory):
            return []
        return [
            name for name in os.listdir(directory)
            if not name.endswith(TEMP_SUFFIX) and os.path.isfile(os.path.join(directory, name))
        ]

    @staticmethod
    def find_existing(directory: str, stem: str) -> Optional[str]:
        """Find a file whose name, without extension, contains `stem`.

        The extension is ignored because it is only known once a file has
        been downloaded.

        Args:
            directory: The directory to scan.
            stem: The file name to look for, without extension.

        Returns:
            The path of the first match, or None.
        """
        if not stem:
            return None
        for name in sorted(FileManager.list_files(directory)):
            if stem in os.path.splitext(name)[0]:
                return os.path.join(directory, name)
        return None

    @staticmethod
    def touch(path: str) -> None:
        """Set the modification time of `path` to now."""
        os.utime(path, None)


@contextmanager
def temporary_file(directory: str) -> Iterator[str]:
    """Yield the path of a new empty temporary file inside `directory`.

    The file lives on the same filesystem as its final destination so it can
    be moved into place with os.replace. Whatever is still at the temporary
    path when the block exits is removed.
    """
    fd, tmp_path = tempfile.mkstemp(prefix='.', suffix=TEMP_SUFFIX, dir=directory)
    os.close(fd)
    try:
        yield tmp_path
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
