"""Batch driver over the Takeout extraction folders of one source root."""
from __future__ import annotations

import time

from ..core.config import MergeConfig
from ..core.errors import RemoteError
from ..core.models import ProcessingAction, ProcessingStats
from ..core.protocols import FolderHandler, ProgressReporter, RemoteFileSystem
from ..remote import ensure_directory, join


class BatchDriver:
    """Feeds every ``<prefix>*/<photos folder>`` into one shared target.

    Takeout splits large exports into "Takeout", "Takeout 2", ... folders,
    each with its own "Google Photos" subfolder. The handler (a mover or a
    renamer) consolidates each of them into ``config.target_root``.
    """

    def __init__(
        self,
        fs: RemoteFileSystem,
        handler: FolderHandler,
        reporter: ProgressReporter,
        config: MergeConfig,
    ):
        self._fs = fs
        self._handler = handler
        self._reporter = reporter
        self._config = config

    def find_takeout_folders(self) -> list[str]:
        """Names of directories under the source root with the prefix.

        Raises:
            RemoteError: The source root cannot be listed.
        """
        return [
            entry.name
            for entry in self._fs.list_dir(self._config.source_root)
            if entry.is_directory and entry.name.startswith(self._config.folder_prefix)
        ]

    def ensure_target(self) -> None:
        target = self._config.target_root
        if self._config.dry_run:
            self._reporter.info(f"(Dry Run) Would ensure target directory: {target}")
            return
        try:
            if ensure_directory(self._fs, target):
                self._reporter.info(f"Created target directory: {target}")
            else:
                self._reporter.debug(f"Target directory {target} already exists.")
        except RemoteError as e:
            self._reporter.warning(f"Target directory {target} may already exist: {e}")

    def run(self) -> ProcessingStats:
        """Process all matching folders; returns the accumulated stats."""
        config = self._config
        stats = ProcessingStats()
        started = time.monotonic()

        self.ensure_target()

        folders = self.find_takeout_folders()
        if not folders:
            self._reporter.warning(f'No "{config.folder_prefix}" folders found in {config.source_root}.')
            stats.elapsed_seconds = time.monotonic() - started
            return stats

        self._reporter.info(f'Found {len(folders)} "{config.folder_prefix}" folder(s).')
        self._reporter.start_phase("Consolidating", total=len(folders))
        try:
            for folder in folders:
                takeout_path = join(config.source_root, folder)
                photos_path = join(takeout_path, config.photos_folder)
                self._reporter.describe_phase(folder)
                try:
                    self._consolidate(takeout_path, photos_path, stats)
                except RemoteError as e:
                    # Unreachable folders are skipped; the rest still run
                    self._reporter.error(f"Error processing {photos_path}, skipping folder: {e}")
                    stats.record(ProcessingAction.ERROR, f"{photos_path}: {e}")
                self._reporter.advance_phase()
        finally:
            self._reporter.end_phase()

        stats.elapsed_seconds = time.monotonic() - started
        return stats

    def _consolidate(self, takeout_path: str, photos_path: str, stats: ProcessingStats) -> None:
        if not self._fs.exists(photos_path):
            self._reporter.info(f'No "{self._config.photos_folder}" folder in {takeout_path}, skipping.')
            return
        self._reporter.info(f"Processing: {photos_path}")
        self._handler.run(photos_path, self._config.target_root, stats)
