"""Tests for run configuration."""
import pytest
from pathlib import Path
from pydantic import ValidationError

from takeout_reorg.core.config import (
    DEFAULT_EXTENSIONS,
    FixDatesConfig,
    MergeConfig,
    ProcessConfig,
    ShareConfig,
    normalize_remote_path,
)


class TestNormalizeRemotePath:
    """Tests for share path normalization."""

    @pytest.mark.parametrize("raw,expected", [
        ("!Pictures/Google Takeout", "!Pictures/Google Takeout"),
        ("/!Pictures/Google Takeout/", "!Pictures/Google Takeout"),
        ("!Pictures\\Google Takeout\\merged", "!Pictures/Google Takeout/merged"),
        ("a//b/./c", "a/b/c"),
        ("", ""),
        ("/", ""),
        (".", ""),
    ])
    def test_normalize(self, raw, expected):
        """Test separators and redundant parts are cleaned up."""
        assert normalize_remote_path(raw) == expected


class TestShareConfig:
    """Tests for ShareConfig."""

    def test_defaults(self):
        """Test guest login defaults."""
        share = ShareConfig(server="192.168.1.121", share="Data")

        assert share.domain == "WORKGROUP"
        assert share.username == "guest"
        assert share.password == ""
        assert share.service == "//192.168.1.121/Data"

    def test_from_env(self, monkeypatch):
        """Test credentials come from the environment."""
        monkeypatch.setenv("SMB_USERNAME", "alice")
        monkeypatch.setenv("SMB_PASSWORD", "s3cret")

        share = ShareConfig.from_env("nas", "Data")

        assert share.username == "alice"
        assert share.password == "s3cret"

    def test_from_env_defaults(self, monkeypatch):
        """Test guest fallback when variables are unset."""
        monkeypatch.delenv("SMB_USERNAME", raising=False)
        monkeypatch.delenv("SMB_PASSWORD", raising=False)

        share = ShareConfig.from_env("nas", "Data")

        assert share.username == "guest"
        assert share.password == ""

    def test_password_not_in_repr(self):
        """Test the password is hidden from repr."""
        share = ShareConfig(server="nas", share="Data", password="s3cret")
        assert "s3cret" not in repr(share)

    def test_blank_server_rejected(self):
        """Test validation of required fields."""
        with pytest.raises(ValidationError):
            ShareConfig(server="  ", share="Data")


class TestMergeConfig:
    """Tests for MergeConfig."""

    def test_default_target(self):
        """Test target defaults to <source>/merged."""
        config = MergeConfig(source_root="!Pictures/Google Takeout 2025-05-20/")

        assert config.source_root == "!Pictures/Google Takeout 2025-05-20"
        assert config.target_root == "!Pictures/Google Takeout 2025-05-20/merged"
        assert config.folder_prefix == "Takeout"
        assert config.photos_folder == "Google Photos"
        assert config.dry_run is False

    def test_explicit_target(self):
        """Test an explicit target is normalized and kept."""
        config = MergeConfig(source_root="a", target_root="/b/c/")
        assert config.target_root == "b/c"

    def test_share_root_source(self):
        """Test a source at the share root."""
        config = MergeConfig(source_root="/")
        assert config.target_root == "merged"

    def test_blank_prefix_rejected(self):
        """Test prefix validation."""
        with pytest.raises(ValidationError):
            MergeConfig(source_root="a", folder_prefix=" ")


class TestProcessConfig:
    """Tests for ProcessConfig."""

    def test_defaults(self):
        """Test default sidecar conventions."""
        config = ProcessConfig(source_root="a/merged", target_root="a/processed")

        assert config.sidecar_extension == ".json"
        assert config.edited_marker == "-edited"
        assert config.staging_dir is None

    def test_same_roots_rejected(self):
        """Test source and target must differ."""
        with pytest.raises(ValidationError, match="must differ"):
            ProcessConfig(source_root="a/merged", target_root="/a/merged/")

    def test_extension_dotted(self):
        """Test the sidecar extension gets a leading dot."""
        config = ProcessConfig(source_root="a", target_root="b", sidecar_extension="JSON")
        assert config.sidecar_extension == ".json"

    def test_staging_dir_expanded(self, tmp_path: Path):
        """Test staging dir is resolved."""
        config = ProcessConfig(source_root="a", target_root="b", staging_dir=tmp_path / "x" / "..")
        assert config.staging_dir == tmp_path.resolve()


class TestFixDatesConfig:
    """Tests for FixDatesConfig."""

    def test_fallback_date(self, tmp_path: Path):
        """Test fallback date format."""
        config = FixDatesConfig(year="2019", root=tmp_path)

        assert config.fallback_date == "2019:01:01 00:00:00"
        assert config.extensions == DEFAULT_EXTENSIONS

    @pytest.mark.parametrize("year", ["19", "20190", "abcd", "", "2019 "])
    def test_invalid_year(self, year):
        """Test only 4-digit years are accepted."""
        with pytest.raises(ValidationError):
            FixDatesConfig(year=year)
