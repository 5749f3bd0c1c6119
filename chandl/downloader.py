"""Download engine: turns one ImageTask into a file on disk."""
import logging
import os
from typing import Dict, List, Optional

from .config import Config
from .exceptions import (
    AggregatorMissError,
    AggregatorNoLinkError,
    DownloadError,
    FetchError,
)
from .file_utils import FileManager, temporary_file
from .http_client import HTTPClient
from .iqdb import IqdbResolver
from .models import ImageTask, Outcome, ResolutionOutcome, ThreadTarget

log = logging.getLogger('chandl')

REPORT_MESSAGES: Dict[Outcome, str] = {
    Outcome.ALREADY_EXISTS: 'Already exists: {name}',
    Outcome.DOWNLOADED: 'Done: {name}',
    Outcome.AGGREGATOR_MISS: 'Not found on iqdb: {name}',
    Outcome.AGGREGATOR_NO_LINK: 'Found on iqdb but no downloadable link: {name}',
    Outcome.FETCH_FAILED: 'Failed to download: {name}',
}


def task_filename(link: str, reverse_search: bool = False) -> str:
    """Name under which the image behind `link` is saved.

    Thumbnails are named like the full image with an `s` appended before
    the extension, so in reverse-search mode every `s` is dropped.
    """
    name = FileManager.basename_from_url(link)
    if reverse_search:
        name = name.replace('s', '')
    return name


class Downloader:
    """Resolves candidate links for an image and saves the first good one."""

    def __init__(
        self,
        config: Config,
        http_client: Optional[HTTPClient] = None,
        resolver: Optional[IqdbResolver] = None,
    ):
        self.config = config
        self.http_client = http_client or HTTPClient(config)
        self.resolver = resolver or IqdbResolver(self.http_client)

    def _prefix(self, task: ImageTask, total: int) -> str:
        if not self.config.numbered or not total:
            return ''
        return f'[{str(task.sequence_number).rjust(len(str(total)))}/{total}] '

    def report(self, task: ImageTask, outcome: ResolutionOutcome, policy: ThreadTarget, total: int = 0) -> None:
        """Log the status line for `outcome`."""
        name = os.path.basename(outcome.path) if outcome.path else task.computed_filename
        message = self._prefix(task, total) + REPORT_MESSAGES[outcome.kind].format(name=name)
        if outcome.kind is Outcome.ALREADY_EXISTS and not policy.print_existing:
            log.debug(message)
        elif outcome.kind is Outcome.FETCH_FAILED:
            log.warning(message)
        else:
            log.info(message)

    def _candidates(self, task: ImageTask, policy: ThreadTarget) -> List[str]:
        if not policy.use_reverse_search:
            return [task.origin_link]
        if not task.fallback_candidates:
            task.fallback_candidates = self.resolver.resolve(task.origin_link)
        return task.fallback_candidates

    def _fetch_candidate(self, link: str, target: str, directory: str) -> str:
        """Download `link` and move it to `target` if it is large enough.

        Raises:
            FetchError: If the request fails.
            DownloadError: If the body is not larger than the minimum size.
        """
        with temporary_file(directory) as tmp_path:
            with open(tmp_path, 'wb') as f:
                self.http_client.download(link, f)
            size = os.path.getsize(tmp_path)
            if size <= self.config.min_file_size:
                raise DownloadError(f'{link} returned only {size} bytes')
            os.replace(tmp_path, target)
        return target

    def _download(self, task: ImageTask, directory: str, candidates: List[str], prefix: str) -> ResolutionOutcome:
        stem = os.path.splitext(task.computed_filename)[0]
        log.info(f'{prefix}Downloading: {task.computed_filename}')
        for link in candidates:
            extension = FileManager.extension_from_url(link)
            target = os.path.join(directory, f'{stem}.{extension}')
            log.debug(f'Trying {link} -> {target}')
            try:
                path = self._fetch_candidate(link, target, directory)
            except (FetchError, DownloadError) as e:
                log.debug(f'Rejected {link}: {e}')
                continue
            return ResolutionOutcome(Outcome.DOWNLOADED, path)
        return ResolutionOutcome(Outcome.FETCH_FAILED)

    def resolve(self, task: ImageTask, directory: str, policy: ThreadTarget, total: int = 0) -> ResolutionOutcome:
        """Work out the outcome for `task` without reporting it."""
        if not policy.override_existing:
            stem = os.path.splitext(task.computed_filename)[0]
            existing = FileManager.find_existing(directory, stem)
            if existing:
                return ResolutionOutcome(Outcome.ALREADY_EXISTS, existing)

        try:
            candidates = self._candidates(task, policy)
        except AggregatorMissError as e:
            log.debug(str(e))
            return ResolutionOutcome(Outcome.AGGREGATOR_MISS)
        except AggregatorNoLinkError as e:
            log.debug(str(e))
            return ResolutionOutcome(Outcome.AGGREGATOR_NO_LINK)
        except FetchError as e:
            log.warning(f'iqdb search failed for {task.origin_link}: {e}')
            return ResolutionOutcome(Outcome.FETCH_FAILED)

        return self._download(task, directory, candidates, self._prefix(task, total))

    def materialize(self, task: ImageTask, directory: str, policy: ThreadTarget, total: int = 0) -> ResolutionOutcome:
        """Make sure the image of `task` is saved in `directory`.

        Args:
            task: The image to save.
            directory: The thread's download directory (must exist).
            policy: The thread's mode flags.
            total: Number of images in the thread, for numbered output.

        Returns:
            The outcome. Only ALREADY_EXISTS and DOWNLOADED carry a path.
        """
        outcome = self.resolve(task, directory, policy, total)
        self.report(task, outcome, policy, total)
        if policy.stamp_mtime and outcome.has_file:
            FileManager.touch(outcome.path)
        return outcome
