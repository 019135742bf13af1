"""Volume plugin protocol schemas.

Field names follow the Docker volume plugin protocol (PascalCase on the
wire); Python attributes stay snake_case through the alias generator.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class PluginModel(BaseModel):
    """Base for wire models."""

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True)


# =============================================================================
# Requests
# =============================================================================


class NameRequest(PluginModel):
    """Request carrying only a volume name (Remove, Path, Get)."""

    name: str


class CreateRequest(PluginModel):
    """Create/Resize request with driver options."""

    name: str
    opts: dict[str, str] | None = None


class MountRequest(PluginModel):
    """Mount/Unmount request; ID identifies the calling container."""

    name: str
    id: str = Field(default="", alias="ID")


# =============================================================================
# Responses
# =============================================================================


class ErrResponse(PluginModel):
    """Response with only an error string (empty on success)."""

    err: str = ""


class MountResponse(PluginModel):
    mountpoint: str = ""
    err: str = ""


class VolumeEntry(PluginModel):
    name: str
    mountpoint: str
    status: dict[str, str] | None = None


class GetResponse(PluginModel):
    volume: VolumeEntry | None = None
    err: str = ""


class ListResponse(PluginModel):
    volumes: list[VolumeEntry] = []
    err: str = ""


class Capability(PluginModel):
    scope: str


class CapabilitiesResponse(PluginModel):
    capabilities: Capability


class ActivateResponse(PluginModel):
    implements: list[str]
