"""Volume path resolution."""

from pathlib import Path

from openvolume.config import PluginConfig
from openvolume.errors import InvalidNameError

IMAGE_NAME = "data.img"

# Single path component limit (NAME_MAX) on Linux filesystems
MAX_NAME_BYTES = 255

_FORBIDDEN_CHARS = ("/", "\\", "\x00")
_RESERVED_NAMES = (".", "..", "lost+found")


def validate_name(name: str) -> str:
    """Reject names that are empty, reserved, too long or could escape the root."""
    if not name or name in _RESERVED_NAMES:
        raise InvalidNameError(f"Invalid volume name: {name!r}")
    if any(ch in name for ch in _FORBIDDEN_CHARS):
        raise InvalidNameError(f"Invalid volume name: {name!r} contains a path separator")
    if len(name.encode("utf-8", errors="surrogateescape")) > MAX_NAME_BYTES:
        raise InvalidNameError(f"Invalid volume name: longer than {MAX_NAME_BYTES} bytes")
    return name


def is_valid_name(name: str) -> bool:
    try:
        validate_name(name)
    except InvalidNameError:
        return False
    return True


class VolumePaths:
    """Maps volume names to directories under the configured root.

    The directory is the volume's identity: it exists if and only if the
    volume exists. Nothing is cached; every call re-derives the path.
    """

    def __init__(self, config: PluginConfig) -> None:
        self._root = config.volume.root_path

    @property
    def root(self) -> Path:
        return self._root

    def volume_path(self, name: str) -> Path:
        return self._root / validate_name(name)

    def image_path(self, name: str) -> Path:
        return self.volume_path(name) / IMAGE_NAME

    def list_names(self) -> list[str]:
        """Names of all volume directories under the root.

        Directories whose names could not have been created as volumes
        (lost+found, foreign names) are skipped.
        """
        if not self._root.is_dir():
            return []
        return sorted(
            p.name for p in self._root.iterdir() if p.is_dir() and is_valid_name(p.name)
        )
