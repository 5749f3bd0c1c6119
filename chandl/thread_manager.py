"""Runs downloads and keeps the threads file in step with them."""
import logging
from typing import List, Optional

from .config import Config
from .exceptions import FetchError, ThreadNotFoundError
from .models import DownloadRequest, RegistryEntry, ThreadSummary, ThreadTarget
from .registry import ThreadRegistry
from .thread_parser import ThreadURL
from .thread_scraper import ThreadScraper

log = logging.getLogger('chandl')


class ThreadManager:
    """Entry point for the `download` and `update` commands."""

    def __init__(
        self,
        config: Config,
        scraper: Optional[ThreadScraper] = None,
        registry: Optional[ThreadRegistry] = None,
    ):
        """Initialize the ThreadManager.

        Args:
            config: Configuration settings.
            scraper: Optional ThreadScraper. If None, creates a new one.
            registry: Optional ThreadRegistry. If None, uses the configured threads file.
        """
        self.config = config
        self.scraper = scraper or ThreadScraper(config)
        self.registry = registry or ThreadRegistry(config.registry_path)

    @staticmethod
    def entry_for(target: ThreadTarget) -> RegistryEntry:
        thread_id = ThreadURL.parse(target.source_url).thread_id
        return RegistryEntry(url=target.source_url, name=target.display_name or thread_id)

    @staticmethod
    def target_for(entry: RegistryEntry, override: bool = False, stamp_mtime: bool = False,
                   print_existing: bool = False) -> ThreadTarget:
        """Build the update target for a watched thread.

        Reverse search is never used on update.
        """
        thread_id = ThreadURL.parse(entry.url).thread_id
        display_name = entry.name if entry.name != thread_id else None
        return ThreadTarget(
            source_url=entry.url,
            display_name=display_name,
            use_reverse_search=False,
            override_existing=override,
            stamp_mtime=stamp_mtime,
            print_existing=print_existing,
        )

    def download(self, request: DownloadRequest) -> ThreadSummary:
        """Download one thread and add it to the threads file.

        Raises:
            SystemExit: With code 1 if the thread page cannot be fetched.
        """
        entries = self.registry.load()
        target = ThreadTarget.from_request(request)
        try:
            summary = self.scraper.scrape(target)
        except FetchError as e:
            log.error(f'Could not load thread {target.source_url}: {e}')
            raise SystemExit(1)

        self.registry.save(self.registry.upsert(entries, self.entry_for(target)))
        return summary

    def update(self, override: bool = False, stamp_mtime: bool = False,
               print_existing: bool = False) -> List[RegistryEntry]:
        """Re-scrape every thread in the threads file.

        Threads whose page is gone or unreachable are dropped from the file.

        Args:
            override: Re-download files that already exist.
            stamp_mtime: Set the modification time of every image to now.
            print_existing: Report images that already exist.

        Returns:
            The entries kept in the threads file.
        """
        entries = self.registry.load()
        if not entries:
            log.warning(f'{self.registry.path} is empty; nothing to update.')
            return []

        kept: List[RegistryEntry] = []
        for number, entry in enumerate(entries, start=1):
            log.info(f'Updating {entry.name} ({number}/{len(entries)})')
            target = self.target_for(entry, override, stamp_mtime, print_existing)
            try:
                self.scraper.scrape(target)
            except ThreadNotFoundError:
                log.info(f'{entry.url} 404\'d; removing from {self.registry.path}')
                continue
            except FetchError as e:
                log.info(f'{entry.url} is unreachable ({e}); removing from {self.registry.path}')
                continue
            kept.append(entry)

        self.registry.save(kept)
        return kept
