"""External tool runner.

Wraps the host utilities that allocate, format, grow and measure backing
images. This is the only place that knows their argument conventions:
callers always speak bytes, and unit conversion (KiB suffix for resize2fs)
happens here.

Every invocation is a single attempt bounded by the configured deadline.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from pydantic import BaseModel

from openvolume.config import ToolsConfig
from openvolume.errors import ToolFailureError, ToolTimeoutError
from openvolume.logging_schema import LogEvent
from openvolume.metrics import TOOL_DURATION, TOOL_ERRORS

logger = logging.getLogger(__name__)

KIB = 1024


class ToolResult(BaseModel):
    """Captured outcome of a finished tool process."""

    returncode: int
    stdout: str
    stderr: str


def round_up(size_bytes: int, granularity: int) -> int:
    """Round size up to the next multiple of granularity."""
    return -(-size_bytes // granularity) * granularity


class ToolRunner:
    """Runs image tools as subprocesses."""

    def __init__(self, config: ToolsConfig | None = None) -> None:
        self._config = config or ToolsConfig()

    async def run(self, operation: str, target: Path, *command: str) -> ToolResult:
        """Run one command and return its output.

        Cancellation also kills the process before propagating.

        Raises:
            ToolTimeoutError: Deadline expired; the process is killed.
            ToolFailureError: Executable missing or non-zero exit status.
        """
        start = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            # Missing or non-executable binary
            TOOL_ERRORS.labels(tool=operation, error_type="not_found").inc()
            raise ToolFailureError(operation, target, f"{command[0]}: {e.strerror or e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._config.timeout
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            TOOL_ERRORS.labels(tool=operation, error_type="timeout").inc()
            logger.error(
                "Tool timed out",
                extra={
                    "event": LogEvent.TOOL_TIMEOUT,
                    "tool": operation,
                    "command": command[0],
                    "target": str(target),
                    "timeout": self._config.timeout,
                },
            )
            raise ToolTimeoutError(operation, target, self._config.timeout)
        except asyncio.CancelledError:
            # Caller gave up; do not leave the child running
            if process.returncode is None:
                process.kill()
            await asyncio.shield(process.wait())
            raise
        finally:
            TOOL_DURATION.labels(tool=operation).observe(time.monotonic() - start)

        result = ToolResult(
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode(errors="replace").strip(),
            stderr=stderr.decode(errors="replace").strip(),
        )
        if result.returncode != 0:
            TOOL_ERRORS.labels(tool=operation, error_type="exit_code").inc()
            detail = result.stderr or f"exit status {result.returncode}"
            logger.warning(
                "Tool failed",
                extra={
                    "event": LogEvent.TOOL_FAILED,
                    "tool": operation,
                    "command": command[0],
                    "target": str(target),
                    "returncode": result.returncode,
                    "error": detail,
                },
            )
            raise ToolFailureError(operation, target, detail)

        return result

    async def allocate(self, image: Path, size_bytes: int) -> None:
        """Create or extend image to exactly size_bytes (sparse)."""
        await self.run("allocate", image, self._config.truncate, "-s", str(size_bytes), str(image))

    async def format_filesystem(self, image: Path, filesystem: str) -> None:
        await self.run(
            "format",
            image,
            f"{self._config.mkfs_prefix}{filesystem}",
            "-F",
            "-q",
            str(image),
        )

    async def grow(self, image: Path, target_bytes: int, filesystem: str | None = None) -> int:
        """Grow image (and its filesystem, if any) to at least target_bytes.

        The target is rounded up to the configured granularity; the image is
        extended to that exact length so the filesystem never outgrows it.

        Returns:
            Committed size in bytes.
        """
        size_bytes = round_up(target_bytes, self._config.grow_granularity)
        await self.allocate(image, size_bytes)
        if filesystem:
            await self.run(
                "grow",
                image,
                self._config.resize2fs,
                str(image),
                f"{size_bytes // KIB}K",
            )
        return size_bytes

    async def measure_used_bytes(self, image: Path) -> int:
        """Return image size in bytes as reported by du."""
        result = await self.run("measure", image, self._config.du, "-sb", str(image))
        fields = result.stdout.split()
        try:
            return int(fields[0])
        except (IndexError, ValueError):
            TOOL_ERRORS.labels(tool="measure", error_type="parse").inc()
            raise ToolFailureError("measure", image, f"unparseable output: {result.stdout!r}")
