"""Scrapes one thread end to end."""
import logging
import os
from typing import List, Optional

from . import links
from .config import Config
from .downloader import Downloader, task_filename
from .file_utils import FileManager
from .http_client import HTTPClient
from .models import ImageTask, Outcome, ThreadSummary, ThreadTarget
from .thread_parser import ThreadURL, extract_links, extract_title

log = logging.getLogger('chandl')


class ThreadScraper:
    """Downloads every image of a thread into its directory."""

    def __init__(
        self,
        config: Config,
        http_client: Optional[HTTPClient] = None,
        downloader: Optional[Downloader] = None,
    ):
        """Initialize the ThreadScraper.

        Args:
            config: Configuration settings.
            http_client: Optional HTTPClient instance. If None, creates a new one.
            downloader: Optional Downloader. If None, one sharing `http_client` is created.
        """
        self.config = config
        self.http_client = http_client or HTTPClient(config)
        self.downloader = downloader or Downloader(config, self.http_client)

    def directory_name(self, target: ThreadTarget, thread_id: str, title: str) -> str:
        """Determine the directory name to use for a thread.

        Returns:
            The explicit directory, "ID - Name" when a name was given, or
            "ID - Title" otherwise.
        """
        if target.directory_name:
            return target.directory_name
        name = target.display_name or title
        return FileManager.sanitize_dirname(f'{thread_id} - {name}')

    def build_tasks(self, hrefs: List[str], target: ThreadTarget) -> List[ImageTask]:
        """Create one ImageTask per distinct image link, in page order."""
        if target.use_reverse_search:
            origins = links.seed_links(hrefs)
        else:
            origins = links.image_links(hrefs, target.source_url)
        return [
            ImageTask(
                origin_link=origin,
                computed_filename=task_filename(origin, target.use_reverse_search),
                sequence_number=number,
            )
            for number, origin in enumerate(origins, start=1)
        ]

    def scrape(self, target: ThreadTarget) -> ThreadSummary:
        """Download the images of `target`.

        Per-image failures are reported and skipped.

        Args:
            target: The thread to scrape.

        Returns:
            A summary with one outcome per image.

        Raises:
            FetchError: If the thread page itself cannot be fetched
                (ThreadNotFoundError when it is archived).
        """
        thread = ThreadURL.parse(target.source_url)
        body = self.http_client.fetch(thread.url)
        hrefs = extract_links(body)
        title = extract_title(body)

        dirname = self.directory_name(target, thread.thread_id, title)
        directory = os.path.join(self.config.workpath, dirname)
        FileManager.ensure_directory(directory)
        log.info(f'Thread {thread.board}/{thread.thread_id} -> {dirname}')

        tasks = self.build_tasks(hrefs, target)
        summary = ThreadSummary(directory=directory)
        if not tasks:
            log.info(f'No images found in {thread.url}')
            return summary

        for task in tasks:
            summary.outcomes.append(
                self.downloader.materialize(task, directory, target, total=len(tasks))
            )

        failed = sum(1 for outcome in summary.outcomes if not outcome.has_file)
        log.info(
            f'Finished {dirname}: {summary.count(Outcome.DOWNLOADED)} downloaded, '
            f'{summary.count(Outcome.ALREADY_EXISTS)} existing, {failed} failed'
        )
        return summary
