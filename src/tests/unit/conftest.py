"""Fixtures for plugin unit tests."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from openvolume.config import PluginConfig, ToolsConfig, VolumeConfig
from openvolume.infra import ToolRunner, round_up
from openvolume.runtime.naming import VolumePaths

GIB = 1024**3


@pytest.fixture
def plugin_config(tmp_path: Path) -> PluginConfig:
    """Config rooted in a temporary directory with a 1 GiB default size."""
    return PluginConfig(
        volume=VolumeConfig(root_path=tmp_path / "volumes", default_size=str(GIB)),
        tools=ToolsConfig(timeout=5.0),
    )


@pytest.fixture
def volume_paths(plugin_config: PluginConfig) -> VolumePaths:
    """VolumePaths with an existing root directory."""
    paths = VolumePaths(plugin_config)
    paths.root.mkdir(parents=True)
    return paths


@pytest.fixture
def mock_tools() -> AsyncMock:
    """Mock ToolRunner for testing.

    grow() mirrors the real rounding so committed sizes are realistic.
    """
    tools = AsyncMock(spec=ToolRunner)
    tools.allocate = AsyncMock()
    tools.format_filesystem = AsyncMock()
    tools.grow = AsyncMock(
        side_effect=lambda image, target, filesystem=None: round_up(target, 1024 * 1024)
    )
    tools.measure_used_bytes = AsyncMock(return_value=GIB)
    return tools
