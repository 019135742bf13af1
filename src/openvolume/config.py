"""Plugin configuration using pydantic-settings.

Configuration hierarchy:
- VolumeConfig: Volume root, default size, driver tag
- ToolsConfig: External tool executables and deadline
- LoggingConfig: Logging behavior
- ServerConfig: Plugin socket
- PluginConfig: Main config aggregating all sub-configs

Environment variable prefix: OPENVOLUME_
Example: OPENVOLUME_VOLUME_ROOT_PATH=/srv/volumes

The legacy static file (config.json) is still honored through
OPENVOLUME_CONFIG_FILE. Its keys override the environment:

    {"mountpoint": "/srv/volumes", "defaultSize": "1073741824", "storageDriver": "local"}
"""

import json
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# config.json key -> VolumeConfig field
_FILE_KEYS = {
    "mountpoint": "root_path",
    "defaultSize": "default_size",
    "storageDriver": "storage_driver",
}


class VolumeConfig(BaseSettings):
    """Volume placement and sizing."""

    model_config = SettingsConfigDict(env_prefix="OPENVOLUME_VOLUME_")

    root_path: Path = Field(
        default=Path("/var/lib/openvolume"),
        description="Directory under which every volume directory is created",
    )
    default_size: str = Field(
        default="10737418240",
        description="Capacity in bytes used when a request carries no size option",
    )
    storage_driver: str = Field(default="local", description="Driver tag reported in volume status")
    filesystem: str | None = Field(
        default=None,
        description="Filesystem to format images with (mkfs.<fs>, resize2fs). Unset: raw images",
    )

    @field_validator("root_path")
    @classmethod
    def validate_root_path(cls, v: Path) -> Path:
        if not v.is_absolute():
            raise ValueError("root_path must be an absolute path")
        return v


class ToolsConfig(BaseSettings):
    """External tool configuration.

    Every invocation is bounded by `timeout`. Resize targets are rounded up
    to `grow_granularity` bytes before they reach the grow tool.
    """

    model_config = SettingsConfigDict(env_prefix="OPENVOLUME_TOOLS_")

    truncate: str = Field(default="truncate", description="Image allocation executable")
    du: str = Field(default="du", description="Disk usage executable")
    resize2fs: str = Field(default="resize2fs", description="Filesystem grow executable")
    mkfs_prefix: str = Field(default="mkfs.", description="Prefix joined with the filesystem type")

    timeout: float = Field(default=60.0, gt=0, description="Per-invocation deadline (seconds)")
    grow_granularity: int = Field(
        default=1024 * 1024,
        description="Resize rounding unit in bytes (multiple of 1024)",
    )

    @field_validator("grow_granularity")
    @classmethod
    def validate_grow_granularity(cls, v: int) -> int:
        if v <= 0 or v % 1024:
            raise ValueError("grow_granularity must be a positive multiple of 1024")
        return v


class LoggingConfig(BaseSettings):
    """Logging configuration.

    Supports both text and JSON formats for different environments:
    - text: Human-readable for local development
    - json: Structured logging for production (log aggregation)
    """

    model_config = SettingsConfigDict(env_prefix="OPENVOLUME_LOGGING_")

    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field(default="text", description="Log format (text, json)")
    service_name: str = Field(default="openvolume", description="Service identifier in logs")


class ServerConfig(BaseSettings):
    """Plugin socket configuration."""

    model_config = SettingsConfigDict(env_prefix="OPENVOLUME_SERVER_")

    socket_path: Path = Field(
        default=Path("/run/docker/plugins/openvolume.sock"),
        description="Unix socket the plugin protocol is served on",
    )


class PluginConfig(BaseSettings):
    """Main plugin configuration aggregating all sub-configs.

    Environment variable prefix: OPENVOLUME_
    Sub-configs use their own prefixes (OPENVOLUME_VOLUME_, OPENVOLUME_TOOLS_, etc.)
    """

    model_config = SettingsConfigDict(
        env_prefix="OPENVOLUME_",
        env_nested_delimiter="__",
    )

    config_file: Path | None = Field(
        default=None,
        description="Optional JSON file with mountpoint/defaultSize/storageDriver",
    )

    # Sub-configurations
    volume: VolumeConfig = Field(default_factory=VolumeConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def read_config_file(path: Path) -> dict[str, str]:
    """Read the static config file and map its keys to VolumeConfig fields.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a JSON object.
    """
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    return {field: data[key] for key, field in _FILE_KEYS.items() if key in data}


def load_plugin_config(config_file: Path | None = None) -> PluginConfig:
    """Build configuration from the environment and the optional static file."""
    config = PluginConfig()
    path = config_file or config.config_file
    if path is None:
        return config

    overrides = read_config_file(path)
    volume = VolumeConfig(**{**config.volume.model_dump(), **overrides})
    return config.model_copy(update={"volume": volume, "config_file": path})


@lru_cache
def get_plugin_config() -> PluginConfig:
    """Get cached plugin configuration singleton."""
    return load_plugin_config()
