"""Watch-list of downloaded threads, stored as `url;name` lines."""
import logging
import os
from typing import Iterable, List

from .links import unique
from .models import RegistryEntry

log = logging.getLogger('chandl')

SEPARATOR = ';'


class ThreadRegistry:
    """Reads and writes the threads file.

    The file is rewritten in full on every save. Edits made to it by hand
    while a run is in progress are lost, and a thread whose name changes is
    listed twice until the stale line is removed by hand.
    """

    def __init__(self, path: str):
        """Initialize the registry.

        Args:
            path: Path to the threads file.
        """
        self.path = path

    def load(self) -> List[RegistryEntry]:
        """Read all entries in file order.

        A missing file is created empty. Lines without a separator are
        reported and skipped.

        Returns:
            The list of entries.
        """
        if not os.path.exists(self.path):
            log.debug(f'Creating empty {self.path}')
            open(self.path, 'w', encoding='utf-8').close()
            return []

        entries = []
        with open(self.path, 'r', encoding='utf-8') as f:
            for number, line in enumerate(f, start=1):
                line = line.rstrip('\n')
                if not line.strip():
                    continue
                if SEPARATOR not in line:
                    log.warning(f'Ignoring malformed line {number} in {self.path}: {line}')
                    continue
                url, name = line.split(SEPARATOR, 1)
                entries.append(RegistryEntry(url=url, name=name))
        return entries

    def save(self, entries: Iterable[RegistryEntry]) -> None:
        """Overwrite the file with `entries`, one per line, order preserved."""
        with open(self.path, 'w', encoding='utf-8') as f:
            for entry in entries:
                f.write(f'{entry.url}{SEPARATOR}{entry.name}\n')

    @staticmethod
    def upsert(entries: Iterable[RegistryEntry], entry: RegistryEntry) -> List[RegistryEntry]:
        """Append `entry` unless an identical (url, name) pair is already listed."""
        return unique(list(entries) + [entry])
