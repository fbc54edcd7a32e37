"""Collision-safe recursive move between remote directories."""
from __future__ import annotations

from ..core.errors import RemoteError, RemoteExistsError, RemoteNotFoundError
from ..core.models import ProcessingAction, ProcessingStats
from ..core.protocols import ProgressReporter, RemoteFileSystem
from ..remote import ensure_directory, join


class CollisionSafeMover:
    """Moves everything under a source directory into a target directory.

    Directories are merged (created on the target if needed, then
    recursed into); files are renamed across and never overwrite. A file
    whose name is already taken on the target stays where it is, which
    makes a rerun after a partial failure pick up where it stopped.
    """

    def __init__(
        self,
        fs: RemoteFileSystem,
        reporter: ProgressReporter,
        dry_run: bool = False,
    ):
        self._fs = fs
        self._reporter = reporter
        self._dry_run = dry_run

    def run(self, source_dir: str, target_dir: str, stats: ProcessingStats) -> None:
        """Move the contents of ``source_dir`` into ``target_dir``."""
        try:
            entries = self._fs.list_dir(source_dir)
        except RemoteNotFoundError:
            self._reporter.warning(f"Source directory not found, skipping: {source_dir}")
            return
        except RemoteError as e:
            self._reporter.error(f"Error reading directory {source_dir}: {e}")
            stats.record(ProcessingAction.ERROR, f"{source_dir}: {e}")
            return

        for entry in entries:
            source_path = join(source_dir, entry.name)
            target_path = join(target_dir, entry.name)
            if entry.is_directory:
                self._merge_directory(source_path, target_path, stats)
            else:
                self._move_file(source_path, target_path, stats)

    def _merge_directory(self, source_path: str, target_path: str, stats: ProcessingStats) -> None:
        if self._dry_run:
            self._reporter.info(f"(Dry Run) Would merge folder: {source_path} -> {target_path}")
        else:
            try:
                if ensure_directory(self._fs, target_path):
                    self._reporter.debug(f"Created folder: {target_path}")
            except RemoteError as e:
                self._reporter.error(f"Cannot create folder {target_path}: {e}")
                stats.record(ProcessingAction.ERROR, f"{target_path}: {e}")
                return
        stats.record(ProcessingAction.DIRECTORY)
        self.run(source_path, target_path, stats)

    def _move_file(self, source_path: str, target_path: str, stats: ProcessingStats) -> None:
        try:
            if self._dry_run:
                action = self._preview_move(source_path, target_path)
            else:
                self._fs.move(source_path, target_path)
                self._reporter.debug(f"Moved: {source_path} -> {target_path}")
                action = ProcessingAction.MOVED
        except RemoteExistsError:
            self._reporter.debug(f"Already on target, skipping: {target_path}")
            action = ProcessingAction.SKIPPED_EXISTING
        except RemoteError as e:
            # Left in place; the next run tries again
            self._reporter.warning(f"Error moving {source_path}: {e}")
            stats.record(ProcessingAction.ERROR, f"{source_path}: {e}")
            return
        stats.record(action)

    def _preview_move(self, source_path: str, target_path: str) -> ProcessingAction:
        if self._fs.exists(target_path):
            self._reporter.info(f"(Dry Run) Already on target, would skip: {target_path}")
            return ProcessingAction.SKIPPED_EXISTING
        self._reporter.info(f"(Dry Run) Would move: {source_path} -> {target_path}")
        return ProcessingAction.MOVED
