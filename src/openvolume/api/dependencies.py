"""API dependencies for dependency injection."""

from openvolume.runtime import PluginRuntime

# Singleton runtime instance
_runtime: PluginRuntime | None = None


async def init_runtime() -> None:
    """Initialize runtime singleton.

    Creates PluginRuntime and makes sure the volume root exists.
    Must be called during app startup.
    """
    global _runtime
    _runtime = PluginRuntime()
    await _runtime.init()


def get_runtime() -> PluginRuntime:
    """Get runtime singleton.

    Raises:
        RuntimeError: If called before init_runtime().
    """
    if _runtime is None:
        raise RuntimeError("Runtime not initialized. Call init_runtime() first.")
    return _runtime


def reset_runtime() -> None:
    """Reset runtime singleton (for testing)."""
    global _runtime
    _runtime = None
