"""Metadata-driven rename of Takeout media into a parallel tree.

For every media file the JSON sidecar supplies the capture time. The file
is downloaded to a private staging folder, its EXIF dates are rewritten,
and it is uploaded as ``YYYY-MM-DD_hh-mm-ss.<ext>`` next to its album
siblings in the target tree. Sources are never modified.
"""
from __future__ import annotations

import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Optional

from ..core.config import ProcessConfig
from ..core.errors import RemoteError, RemoteNotFoundError
from ..core.models import MediaItem, ProcessingAction, ProcessingStats, TargetNamespace
from ..core.protocols import MetadataTool, ProgressReporter, RemoteFileSystem
from ..engines.filetype import resolve_extension
from ..remote import ensure_directory, join
from .sidecar import (
    epoch_to_local,
    extract_capture_timestamp,
    find_media_sidecar,
    format_base_name,
    format_exif_datetime,
    is_edited_variant,
    is_sidecar,
    load_sidecar,
    superseded_originals,
)


class MetadataRenamer:
    """Renames and re-dates media files from their Takeout sidecars.

    Each directory gets its own TargetNamespace, seeded from the target's
    current listing and threaded through the per-file step, so names are
    never reused within a directory and existing files are left alone.
    A failure on one file is reported and counted; the batch continues.
    """

    def __init__(
        self,
        fs: RemoteFileSystem,
        tool: MetadataTool,
        reporter: ProgressReporter,
        config: ProcessConfig,
    ):
        """Initialize the renamer.

        Args:
            fs: Share holding both source and target trees.
            tool: Reads file types and writes capture dates.
            reporter: User-facing output.
            config: Dry-run flag, staging folder, sidecar conventions.
        """
        self._fs = fs
        self._tool = tool
        self._reporter = reporter
        self._config = config

    def run(self, source_dir: str, target_dir: str, stats: ProcessingStats) -> None:
        """Process ``source_dir`` recursively into ``target_dir``.

        Raises:
            RemoteError: ``source_dir`` itself cannot be listed.
        """
        staging_root = self._config.staging_dir
        if staging_root is not None:
            staging_root.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(prefix="takeout-reorg-", dir=staging_root) as staging:
            self._process_directory(source_dir, target_dir, Path(staging), stats)

    def _process_directory(
        self,
        source_dir: str,
        target_dir: str,
        staging: Path,
        stats: ProcessingStats,
    ) -> None:
        self._reporter.info(f"Processing source: {source_dir}")
        self._reporter.debug(f"Writing to target: {target_dir}")

        entries = self._fs.list_dir(source_dir)
        names = [entry.name for entry in entries]
        namespace = self._load_namespace(target_dir)
        originals = superseded_originals(names, self._config.edited_marker)

        for entry in entries:
            if entry.is_directory:
                stats.record(ProcessingAction.DIRECTORY)
                try:
                    self._process_directory(
                        join(source_dir, entry.name),
                        join(target_dir, entry.name),
                        staging,
                        stats,
                    )
                except RemoteError as e:
                    self._reporter.error(f"Error processing folder {entry.name}: {e}")
                    stats.record(ProcessingAction.ERROR, f"{join(source_dir, entry.name)}: {e}")
                continue

            if is_sidecar(entry.name, self._config.sidecar_extension):
                self._reporter.debug(f"Skipping: {entry.name}")
                stats.record(ProcessingAction.SKIPPED_SIDECAR)
                continue

            if entry.name in originals:
                self._reporter.info(f"Skipping original with edited version: {entry.name}")
                stats.record(ProcessingAction.SKIPPED_ORIGINAL)
                continue

            self._process_file(source_dir, target_dir, entry.name, names, namespace, staging, stats)

    def _load_namespace(self, target_dir: str) -> TargetNamespace:
        """Names already present in ``target_dir``; creates it when missing."""
        try:
            return TargetNamespace(entry.name for entry in self._fs.list_dir(target_dir))
        except RemoteNotFoundError:
            pass

        self._reporter.debug(f"Target directory {target_dir} is new. Ensuring it exists.")
        if not self._config.dry_run:
            ensure_directory(self._fs, target_dir)
        return TargetNamespace()

    def _process_file(
        self,
        source_dir: str,
        target_dir: str,
        name: str,
        names: list[str],
        namespace: TargetNamespace,
        staging: Path,
        stats: ProcessingStats,
    ) -> None:
        source_path = join(source_dir, name)
        staged = staging / name
        try:
            self._fs.fetch(source_path, staged)
            action = self._place_file(source_dir, target_dir, name, names, namespace, staged)
            stats.record(action)
        except Exception as e:
            self._reporter.error(f"Error processing {source_path}: {e}")
            stats.record(ProcessingAction.ERROR, f"{source_path}: {e}")
        finally:
            staged.unlink(missing_ok=True)

    def _place_file(
        self,
        source_dir: str,
        target_dir: str,
        name: str,
        names: list[str],
        namespace: TargetNamespace,
        staged: Path,
    ) -> ProcessingAction:
        config = self._config
        item = MediaItem(
            source_path=join(source_dir, name),
            name=name,
            sidecar_name=find_media_sidecar(
                name, names, config.sidecar_extension, config.edited_marker,
            ),
            is_edited_variant=is_edited_variant(name, config.edited_marker),
        )
        if not item.has_sidecar:
            return self._copy_unchanged(target_dir, name, namespace, staged)

        timestamp = self._read_timestamp(source_dir, item.sidecar_name, staged.parent)
        if timestamp is None:
            self._reporter.warning(f"No timestamp for {name}, skipping.")
            return ProcessingAction.SKIPPED_NO_TIMESTAMP

        item = replace(item, captured_at=epoch_to_local(timestamp))
        base = format_base_name(item.captured_at, item.is_edited_variant, config.edited_marker)
        extension = resolve_extension(staged, name, self._tool)

        new_name = namespace.unique_name(base, extension)
        if new_name is None or new_name in namespace:
            self._reporter.warning(f"No free name for {name} ({base}.{extension}), skipping.")
            return ProcessingAction.SKIPPED_EXISTING

        target_path = join(target_dir, new_name)
        self._reporter.info(f"Processing: {name} -> {new_name}")
        if config.dry_run:
            self._reporter.info(f"(Dry Run) Would update EXIF and upload to {target_path}")
        else:
            self._tool.write_capture_time(staged, format_exif_datetime(item.captured_at))
            self._fs.upload(staged, target_path)
            self._reporter.debug(f"Processed and uploaded to {target_path}")
        namespace.add(new_name)
        return ProcessingAction.RENAMED

    def _copy_unchanged(
        self,
        target_dir: str,
        name: str,
        namespace: TargetNamespace,
        staged: Path,
    ) -> ProcessingAction:
        self._reporter.info(f"No metadata for: {name}, copying as-is.")
        if name in namespace:
            self._reporter.debug(f"Skipping already existing file: {name}")
            return ProcessingAction.SKIPPED_EXISTING

        target_path = join(target_dir, name)
        if self._config.dry_run:
            self._reporter.info(f"(Dry Run) Would copy to {target_path}")
        else:
            self._fs.upload(staged, target_path)
            self._reporter.debug(f"Copied to {target_path}")
        namespace.add(name)
        return ProcessingAction.COPIED

    def _read_timestamp(self, source_dir: str, sidecar_name: str, staging: Path) -> Optional[int]:
        """Capture epoch from the sidecar; None if it carries no usable time."""
        staged_sidecar = staging / f"sidecar-{sidecar_name}"
        try:
            self._fs.fetch(join(source_dir, sidecar_name), staged_sidecar)
            return extract_capture_timestamp(load_sidecar(staged_sidecar))
        finally:
            staged_sidecar.unlink(missing_ok=True)
