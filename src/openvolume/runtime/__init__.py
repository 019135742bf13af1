"""Volume runtime for the plugin."""

import asyncio

from openvolume.config import PluginConfig, get_plugin_config
from openvolume.infra import ToolRunner
from openvolume.runtime.naming import VolumePaths
from openvolume.runtime.result import OperationResult, OperationStatus
from openvolume.runtime.volume import VolumeInfo, VolumeManager


class PluginRuntime:
    """Plugin runtime combining path resolution, tools, and volume management."""

    def __init__(self, config: PluginConfig | None = None) -> None:
        self._config = config or get_plugin_config()
        self.paths = VolumePaths(self._config)
        self.tools = ToolRunner(self._config.tools)
        self.volumes = VolumeManager(self._config, self.paths, self.tools)

    async def init(self) -> None:
        """Ensure the volume root exists."""
        await asyncio.to_thread(self.paths.root.mkdir, mode=0o755, parents=True, exist_ok=True)


__all__ = [
    "PluginRuntime",
    "VolumeManager",
    "VolumeInfo",
    "VolumePaths",
    "OperationResult",
    "OperationStatus",
]
