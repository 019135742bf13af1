"""Unit tests for VolumePaths."""

from pathlib import Path

import pytest

from openvolume.config import PluginConfig
from openvolume.errors import InvalidNameError
from openvolume.runtime.naming import IMAGE_NAME, MAX_NAME_BYTES, VolumePaths, validate_name


class TestValidateName:
    """Tests for validate_name."""

    @pytest.mark.parametrize("name", ["db", "my-volume_1", "with space", "a.b", "..."])
    def test_accepts_plain_names(self, name: str) -> None:
        assert validate_name(name) == name

    @pytest.mark.parametrize(
        "name",
        ["", ".", "..", "lost+found", "../etc", "a/b", "/abs", "a\\b", "nul\x00byte"],
    )
    def test_rejects_escaping_names(self, name: str) -> None:
        with pytest.raises(InvalidNameError):
            validate_name(name)


class TestVolumePaths:
    """Tests for VolumePaths."""

    def test_volume_path_under_root(self, plugin_config: PluginConfig) -> None:
        paths = VolumePaths(plugin_config)

        assert paths.volume_path("db") == plugin_config.volume.root_path / "db"

    def test_image_path(self, plugin_config: PluginConfig) -> None:
        paths = VolumePaths(plugin_config)

        assert paths.image_path("db") == plugin_config.volume.root_path / "db" / IMAGE_NAME

    def test_resolution_is_stable(self, plugin_config: PluginConfig) -> None:
        paths = VolumePaths(plugin_config)

        assert paths.volume_path("db") == paths.volume_path("db")

    def test_distinct_names_distinct_paths(self, plugin_config: PluginConfig) -> None:
        paths = VolumePaths(plugin_config)
        names = ["db", "db.", "db..", "DB", "d b"]

        resolved = {paths.volume_path(n) for n in names}

        assert len(resolved) == len(names)

    def test_invalid_name_never_resolves(self, plugin_config: PluginConfig) -> None:
        paths = VolumePaths(plugin_config)

        with pytest.raises(InvalidNameError):
            paths.volume_path("../../etc")

    def test_list_names_missing_root(self, plugin_config: PluginConfig) -> None:
        paths = VolumePaths(plugin_config)

        assert paths.list_names() == []

    def test_list_names_only_directories(self, volume_paths: VolumePaths) -> None:
        root: Path = volume_paths.root
        (root / "db").mkdir()
        (root / "cache").mkdir()
        (root / "stray-file").write_text("")

        assert volume_paths.list_names() == ["cache", "db"]

    def test_list_names_skips_invalid_directories(self, volume_paths: VolumePaths) -> None:
        root: Path = volume_paths.root
        (root / "db").mkdir()
        (root / "lost+found").mkdir()
        (root / "a\\b").mkdir()

        assert volume_paths.list_names() == ["db"]


class TestNameLength:
    """Names must fit in a single path component."""

    def test_accepts_name_at_limit(self) -> None:
        name = "v" * MAX_NAME_BYTES

        assert validate_name(name) == name

    def test_rejects_name_over_limit(self) -> None:
        with pytest.raises(InvalidNameError, match="255 bytes"):
            validate_name("v" * (MAX_NAME_BYTES + 1))

    def test_limit_counts_utf8_bytes(self) -> None:
        # 128 two-byte characters: 128 chars, 256 bytes
        with pytest.raises(InvalidNameError):
            validate_name("é" * 128)
