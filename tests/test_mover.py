"""Tests for the collision-safe mover."""
import pytest
from pathlib import Path

from takeout_reorg.core.errors import RemoteError
from takeout_reorg.core.models import ProcessingStats
from takeout_reorg.remote import LocalFileSystem
from takeout_reorg.services.mover import CollisionSafeMover
from .fixtures import RecordingReporter, TakeoutPhoto, make_image, tree


@pytest.fixture
def share(tmp_path: Path) -> Path:
    root = tmp_path / "share"
    photos = root / "src" / "Google Photos"
    TakeoutPhoto("IMG_0001.jpg", taken="1609459200").create(photos / "Photos from 2021")
    TakeoutPhoto("beach.jpg", taken="1625140800").create(photos / "Vacation")
    (root / "dst").mkdir()
    return root


@pytest.fixture
def reporter():
    return RecordingReporter()


class TestCollisionSafeMover:
    """Tests for CollisionSafeMover."""

    def test_moves_everything(self, share, reporter):
        """Test files and folders end up under the target."""
        stats = ProcessingStats()
        CollisionSafeMover(LocalFileSystem(share), reporter).run("src/Google Photos", "dst", stats)

        assert tree(share / "dst") == {
            "Photos from 2021/IMG_0001.jpg",
            "Photos from 2021/IMG_0001.jpg.json",
            "Vacation/beach.jpg",
            "Vacation/beach.jpg.json",
        }
        assert tree(share / "src") == set()
        assert stats.moved == 4
        assert stats.directories == 2
        assert stats.errors == 0

    def test_merges_into_existing_folder(self, share, reporter):
        """Test an existing target folder keeps its files."""
        make_image(share / "dst" / "Vacation" / "older.jpg")

        CollisionSafeMover(LocalFileSystem(share), reporter).run("src/Google Photos", "dst", ProcessingStats())

        assert {"Vacation/older.jpg", "Vacation/beach.jpg"} <= tree(share / "dst")

    def test_never_overwrites(self, share, reporter):
        """Test a name already on the target stays in the source."""
        existing = make_image(share / "dst" / "Vacation" / "beach.jpg", color="blue")
        before = existing.read_bytes()
        stats = ProcessingStats()

        CollisionSafeMover(LocalFileSystem(share), reporter).run("src/Google Photos", "dst", stats)

        assert existing.read_bytes() == before
        assert (share / "src" / "Google Photos" / "Vacation" / "beach.jpg").exists()
        assert stats.skipped_existing == 1
        assert stats.moved == 3

    def test_second_run_is_noop(self, share, reporter):
        """Test rerunning after completion moves nothing."""
        fs = LocalFileSystem(share)
        CollisionSafeMover(fs, reporter).run("src/Google Photos", "dst", ProcessingStats())
        before = tree(share / "dst")

        stats = ProcessingStats()
        CollisionSafeMover(fs, reporter).run("src/Google Photos", "dst", stats)

        assert tree(share / "dst") == before
        assert stats.moved == 0
        assert stats.errors == 0

    def test_dry_run(self, share, reporter):
        """Test dry run reports moves without touching anything."""
        before_src = tree(share / "src")
        stats = ProcessingStats()

        CollisionSafeMover(LocalFileSystem(share), reporter, dry_run=True).run("src/Google Photos", "dst", stats)

        assert tree(share / "src") == before_src
        assert list((share / "dst").iterdir()) == []
        assert stats.moved == 4
        assert "(Dry Run) Would move" in reporter.text("info")

    def test_missing_source(self, share, reporter):
        """Test a missing source is a warning, not an error."""
        stats = ProcessingStats()
        CollisionSafeMover(LocalFileSystem(share), reporter).run("nope", "dst", stats)

        assert "Source directory not found" in reporter.text("warning")
        assert stats.errors == 0

    def test_move_failure_continues(self, share, reporter, monkeypatch):
        """Test one failing move leaves the file and continues."""
        fs = LocalFileSystem(share)
        real_move = fs.move

        def flaky_move(source, target):
            if source.endswith("IMG_0001.jpg"):
                raise RemoteError("NT_STATUS_SHARING_VIOLATION")
            real_move(source, target)

        monkeypatch.setattr(fs, "move", flaky_move)
        stats = ProcessingStats()

        CollisionSafeMover(fs, reporter).run("src/Google Photos", "dst", stats)

        assert (share / "src" / "Google Photos" / "Photos from 2021" / "IMG_0001.jpg").exists()
        assert stats.moved == 3
        assert stats.skipped_existing == 0
        assert stats.errors == 1
        assert "IMG_0001.jpg" in stats.failures[0]
        assert "NT_STATUS_SHARING_VIOLATION" in reporter.text("warning")

    def test_rerun_after_collision_is_stable(self, share, reporter):
        """Test a second run over a collided tree changes nothing."""
        make_image(share / "dst" / "Vacation" / "beach.jpg", color="blue")
        fs = LocalFileSystem(share)
        CollisionSafeMover(fs, reporter).run("src/Google Photos", "dst", ProcessingStats())
        before = {p: p.read_bytes() for p in share.rglob("*") if p.is_file()}

        stats = ProcessingStats()
        CollisionSafeMover(fs, reporter).run("src/Google Photos", "dst", stats)

        assert {p: p.read_bytes() for p in share.rglob("*") if p.is_file()} == before
        assert tree(share / "src") == {"Google Photos/Vacation/beach.jpg"}
        assert stats.moved == 0
        assert stats.skipped_existing == 1
        assert stats.errors == 0

    def test_dry_run_previews_collision(self, share, reporter):
        """Test dry run reports a taken name as skipped, like a real run."""
        existing = make_image(share / "dst" / "Vacation" / "beach.jpg", color="blue")
        stats = ProcessingStats()

        CollisionSafeMover(LocalFileSystem(share), reporter, dry_run=True).run("src/Google Photos", "dst", stats)

        assert tree(share / "dst") == {"Vacation/beach.jpg"}
        assert existing.exists()
        assert stats.moved == 3
        assert stats.skipped_existing == 1
        info = reporter.text("info")
        assert "Already on target, would skip: dst/Vacation/beach.jpg" in info
        assert "Would move: src/Google Photos/Vacation/beach.jpg" not in info
