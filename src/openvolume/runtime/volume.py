"""Volume lifecycle manager.

Volume state is never stored: a volume exists if and only if its directory
exists under the root, and its size is whatever du reports for the backing
image. Every public operation returns an OperationResult; VolumeErrors are
converted at this boundary and logged with the volume name.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from typing import TYPE_CHECKING

from pydantic import BaseModel

from openvolume.errors import (
    AllocationFailedError,
    RemovalFailedError,
    ResizeFailedError,
    SizeNotIncreasingError,
    ToolFailureError,
    VolumeError,
    VolumeNotFoundError,
)
from openvolume.infra import ToolRunner
from openvolume.logging_schema import LogEvent
from openvolume.metrics import VOLUME_OPERATIONS, VOLUMES_TOTAL
from openvolume.runtime.lock import get_volume_lock
from openvolume.runtime.result import OperationResult, OperationStatus
from openvolume.runtime.size import resolve_size

if TYPE_CHECKING:
    from pathlib import Path

    from openvolume.config import PluginConfig
    from openvolume.runtime.naming import VolumePaths

logger = logging.getLogger(__name__)

SIZE_OPTION = "size"
SCOPE_LOCAL = "local"


class VolumeInfo(BaseModel):
    name: str
    mountpoint: str
    status: dict[str, str] = {}


class VolumeManager:
    """File-backed volume manager."""

    def __init__(
        self,
        config: PluginConfig,
        paths: VolumePaths,
        tools: ToolRunner | None = None,
    ) -> None:
        self._config = config
        self._paths = paths
        self._tools = tools or ToolRunner(config.tools)

    # =========================================================================
    # Lifecycle operations
    # =========================================================================

    async def create(self, name: str, options: dict[str, str] | None = None) -> OperationResult:
        """Create volume directory and backing image.

        Idempotent: an existing directory returns ALREADY_EXISTS without
        touching its contents.
        """
        try:
            path = self._paths.volume_path(name)
            async with get_volume_lock(name):
                if await self._exists(path, AllocationFailedError):
                    logger.info(
                        "Volume already exists",
                        extra={
                            "event": LogEvent.VOLUME_CREATED,
                            "volume": name,
                            "status": "already_exists",
                        },
                    )
                    return self._record(
                        "create",
                        OperationResult(
                            status=OperationStatus.ALREADY_EXISTS,
                            message="Volume already exists",
                            mountpoint=str(path),
                        ),
                    )

                size = resolve_size(
                    (options or {}).get(SIZE_OPTION), self._config.volume.default_size
                )
                await self._allocate(name, path, size)
        except VolumeError as exc:
            return self._failed("create", name, exc)

        logger.info(
            "Volume created",
            extra={"event": LogEvent.VOLUME_CREATED, "volume": name, "size_bytes": size},
        )
        return self._record(
            "create",
            OperationResult(
                status=OperationStatus.COMPLETED,
                mountpoint=str(path),
                size_bytes=size,
            ),
        )

    async def remove(self, name: str) -> OperationResult:
        """Delete volume directory recursively.

        Idempotent: an absent directory returns ALREADY_DELETED.
        """
        try:
            path = self._paths.volume_path(name)
            async with get_volume_lock(name):
                if not await self._exists(path, RemovalFailedError):
                    logger.info(
                        "Volume already deleted",
                        extra={
                            "event": LogEvent.VOLUME_REMOVED,
                            "volume": name,
                            "status": "already_deleted",
                        },
                    )
                    return self._record(
                        "remove",
                        OperationResult(
                            status=OperationStatus.ALREADY_DELETED,
                            message="Volume does not exist",
                        ),
                    )

                try:
                    await asyncio.to_thread(shutil.rmtree, path)
                except OSError as e:
                    raise RemovalFailedError(f"Failed to remove volume {name}: {e}") from e
        except VolumeError as exc:
            return self._failed("remove", name, exc)

        logger.info("Volume removed", extra={"event": LogEvent.VOLUME_REMOVED, "volume": name})
        return self._record("remove", OperationResult(status=OperationStatus.COMPLETED))

    async def mount(self, name: str) -> OperationResult:
        """Hand back the volume directory as the mountpoint.

        No mount syscall is made; the directory itself is the mountpoint.
        """
        try:
            path = await self._require(name)
        except VolumeError as exc:
            return self._failed("mount", name, exc)

        logger.info(
            "Volume mounted",
            extra={"event": LogEvent.VOLUME_MOUNTED, "volume": name, "mountpoint": str(path)},
        )
        return self._record(
            "mount", OperationResult(status=OperationStatus.COMPLETED, mountpoint=str(path))
        )

    async def unmount(self, name: str) -> OperationResult:
        """Release the logical mount. Never touches the directory."""
        try:
            self._paths.volume_path(name)
        except VolumeError as exc:
            return self._failed("unmount", name, exc)

        logger.info("Volume unmounted", extra={"event": LogEvent.VOLUME_UNMOUNTED, "volume": name})
        return self._record("unmount", OperationResult(status=OperationStatus.COMPLETED))

    def capabilities(self) -> OperationResult:
        """Volumes live on this host only."""
        return OperationResult(status=OperationStatus.COMPLETED, scope=SCOPE_LOCAL)

    async def resize(self, name: str, options: dict[str, str] | None = None) -> OperationResult:
        """Grow the backing image to the requested size.

        The request must strictly exceed the measured size; shrinking is
        never attempted. A failed filesystem grow is not rolled back, so the
        image may be left larger than the filesystem inside it.
        """
        try:
            image = self._paths.image_path(name)
            async with get_volume_lock(name):
                await self._require(name)
                requested = resolve_size((options or {}).get(SIZE_OPTION), None)
                current = await self._tools.measure_used_bytes(image)
                if requested <= current:
                    raise SizeNotIncreasingError(
                        f"Requested size {requested} must exceed current size {current}"
                    )

                filesystem = self._config.volume.filesystem
                try:
                    size = await self._tools.grow(image, requested, filesystem)
                except ToolFailureError as e:
                    logger.error(
                        "Volume grow failed, image may exceed its filesystem",
                        extra={
                            "event": LogEvent.VOLUME_OPERATION_FAILED,
                            "volume": name,
                            "requested_bytes": requested,
                            "error": e.message,
                        },
                    )
                    raise ResizeFailedError(f"Failed to resize volume {name}: {e.detail}") from e
        except VolumeError as exc:
            return self._failed("resize", name, exc)

        logger.info(
            "Volume resized",
            extra={
                "event": LogEvent.VOLUME_RESIZED,
                "volume": name,
                "previous_bytes": current,
                "size_bytes": size,
            },
        )
        return self._record(
            "resize", OperationResult(status=OperationStatus.COMPLETED, size_bytes=size)
        )

    # =========================================================================
    # Queries
    # =========================================================================

    async def path(self, name: str) -> OperationResult:
        try:
            path = await self._require(name)
        except VolumeError as exc:
            return OperationResult.failed(exc)
        return OperationResult(status=OperationStatus.COMPLETED, mountpoint=str(path))

    async def get(self, name: str) -> VolumeInfo:
        """Describe a volume.

        Raises:
            InvalidNameError: Name rejected.
            VolumeNotFoundError: Directory does not exist.
        """
        path = await self._require(name)
        return self._info(name, path)

    async def list_all(self) -> list[VolumeInfo]:
        names = await asyncio.to_thread(self._paths.list_names)
        VOLUMES_TOTAL.set(len(names))
        return [self._info(name, self._paths.volume_path(name)) for name in names]

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _require(self, name: str) -> Path:
        path = self._paths.volume_path(name)
        if not await self._exists(path, VolumeNotFoundError):
            raise VolumeNotFoundError(f"Volume {name} not found")
        return path

    @staticmethod
    async def _exists(path: Path, error: type[VolumeError]) -> bool:
        """Whether the volume directory exists; stat errors raise error."""
        try:
            return await asyncio.to_thread(path.is_dir)
        except OSError as e:
            raise error(f"Cannot access {path}: {e.strerror or e}") from e

    async def _allocate(self, name: str, path: Path, size: int) -> None:
        """Create directory and image, removing the directory on failure."""
        try:
            await asyncio.to_thread(path.mkdir, mode=0o755, parents=True)
        except OSError as e:
            raise AllocationFailedError(f"Failed to create volume {name}: {e}") from e

        image = self._paths.image_path(name)
        filesystem = self._config.volume.filesystem
        try:
            await self._tools.allocate(image, size)
            if filesystem:
                await self._tools.format_filesystem(image, filesystem)
        except ToolFailureError as e:
            await self._rollback(name, path)
            raise AllocationFailedError(f"Failed to create volume {name}: {e.detail}") from e
        except asyncio.CancelledError:
            await self._rollback(name, path)
            raise

    @staticmethod
    async def _rollback(name: str, path: Path) -> None:
        logger.warning(
            "Rolling back partially created volume",
            extra={"event": LogEvent.VOLUME_ROLLBACK, "volume": name, "path": str(path)},
        )
        await asyncio.to_thread(shutil.rmtree, path, ignore_errors=True)

    def _info(self, name: str, path: Path) -> VolumeInfo:
        return VolumeInfo(
            name=name,
            mountpoint=str(path),
            status={"driver": self._config.volume.storage_driver},
        )

    def _failed(self, operation: str, name: str, exc: VolumeError) -> OperationResult:
        logger.warning(
            "Volume %s failed: %s",
            operation,
            exc.message,
            extra={
                "event": LogEvent.VOLUME_OPERATION_FAILED,
                "volume": name,
                "operation": operation,
                "error_code": exc.code.value,
            },
        )
        return self._record(operation, OperationResult.failed(exc))

    @staticmethod
    def _record(operation: str, result: OperationResult) -> OperationResult:
        VOLUME_OPERATIONS.labels(operation=operation, status=result.status.value).inc()
        return result
