"""Volume plugin protocol endpoints.

Every verb answers HTTP 200; failures travel in the Err field.
"""

from fastapi import APIRouter, Depends

from openvolume.api.dependencies import get_runtime
from openvolume.api.schemas import (
    ActivateResponse,
    Capability,
    CapabilitiesResponse,
    CreateRequest,
    ErrResponse,
    GetResponse,
    ListResponse,
    MountRequest,
    MountResponse,
    NameRequest,
    VolumeEntry,
)
from openvolume.errors import VolumeError
from openvolume.runtime import OperationResult, PluginRuntime

router = APIRouter(tags=["plugin"])


def _err(result: OperationResult) -> str:
    return "" if result.is_success else result.message


@router.post("/Plugin.Activate", response_model=ActivateResponse)
async def activate() -> ActivateResponse:
    """Handshake: this plugin implements the volume driver API."""
    return ActivateResponse(implements=["VolumeDriver"])


@router.post("/VolumeDriver.Create", response_model=ErrResponse)
async def create_volume(
    request: CreateRequest,
    runtime: PluginRuntime = Depends(get_runtime),
) -> ErrResponse:
    result = await runtime.volumes.create(request.name, request.opts)
    return ErrResponse(err=_err(result))


@router.post("/VolumeDriver.Remove", response_model=ErrResponse)
async def remove_volume(
    request: NameRequest,
    runtime: PluginRuntime = Depends(get_runtime),
) -> ErrResponse:
    result = await runtime.volumes.remove(request.name)
    return ErrResponse(err=_err(result))


@router.post("/VolumeDriver.Mount", response_model=MountResponse)
async def mount_volume(
    request: MountRequest,
    runtime: PluginRuntime = Depends(get_runtime),
) -> MountResponse:
    result = await runtime.volumes.mount(request.name)
    return MountResponse(mountpoint=result.mountpoint or "", err=_err(result))


@router.post("/VolumeDriver.Unmount", response_model=ErrResponse)
async def unmount_volume(
    request: MountRequest,
    runtime: PluginRuntime = Depends(get_runtime),
) -> ErrResponse:
    result = await runtime.volumes.unmount(request.name)
    return ErrResponse(err=_err(result))


@router.post("/VolumeDriver.Path", response_model=MountResponse)
async def volume_path(
    request: NameRequest,
    runtime: PluginRuntime = Depends(get_runtime),
) -> MountResponse:
    result = await runtime.volumes.path(request.name)
    return MountResponse(mountpoint=result.mountpoint or "", err=_err(result))


@router.post(
    "/VolumeDriver.Get",
    response_model=GetResponse,
    response_model_exclude_none=True,
)
async def get_volume(
    request: NameRequest,
    runtime: PluginRuntime = Depends(get_runtime),
) -> GetResponse:
    try:
        info = await runtime.volumes.get(request.name)
    except VolumeError as exc:
        return GetResponse(err=exc.message)
    return GetResponse(
        volume=VolumeEntry(name=info.name, mountpoint=info.mountpoint, status=info.status)
    )


@router.post(
    "/VolumeDriver.List",
    response_model=ListResponse,
    response_model_exclude_none=True,
)
async def list_volumes(
    runtime: PluginRuntime = Depends(get_runtime),
) -> ListResponse:
    volumes = await runtime.volumes.list_all()
    return ListResponse(
        volumes=[VolumeEntry(name=v.name, mountpoint=v.mountpoint) for v in volumes]
    )


@router.post("/VolumeDriver.Capabilities", response_model=CapabilitiesResponse)
async def capabilities(
    runtime: PluginRuntime = Depends(get_runtime),
) -> CapabilitiesResponse:
    result = runtime.volumes.capabilities()
    return CapabilitiesResponse(capabilities=Capability(scope=result.scope or "local"))


@router.post("/VolumeDriver.Resize", response_model=ErrResponse)
async def resize_volume(
    request: CreateRequest,
    runtime: PluginRuntime = Depends(get_runtime),
) -> ErrResponse:
    """Grow a volume. Not part of the upstream protocol; same request shape as Create."""
    result = await runtime.volumes.resize(request.name, request.opts)
    return ErrResponse(err=_err(result))
