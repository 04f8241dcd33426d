from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from devgate.core.config import settings
from devgate.db.session import get_db
from devgate.multitenancy.deps import DeviceContext, get_device_context, get_host_info, require_allowed_host
from devgate.multitenancy.host_info import ResolvedHostInfo
from devgate.multitenancy.redirect import build_redirect_host, build_redirect_location, join_host_port_if_needed
from devgate.multitenancy.tenant_resolution import match_base_domain, resolve_device_host
from devgate.schemas.device import DeviceOut
from devgate.schemas.routing import HostInfoOut, HostInfoResponse
from devgate.services import device_service


router = APIRouter(prefix='/route', tags=['routing'])


@router.get('/host-info', response_model=HostInfoResponse)
def get_request_host_info(host_info: ResolvedHostInfo = Depends(get_host_info)) -> HostInfoResponse:
    resolution = resolve_device_host(host_info.host, base_domains=settings.base_domains)
    return HostInfoResponse(
        host_info=HostInfoOut(**asdict(host_info)),
        allowed=resolution.base_domain is not None,
        base_domain=resolution.base_domain,
        device_id=resolution.device_id,
    )


@router.get('/device', response_model=DeviceOut)
def get_addressed_device(ctx: DeviceContext = Depends(get_device_context)) -> DeviceOut:
    return DeviceOut.model_validate(ctx.device)


@router.get('/connect/{device_id}')
def connect_device(
    device_id: str,
    sid: str = Query(min_length=1),
    path: str = Query(default='/'),
    host_info: ResolvedHostInfo = Depends(require_allowed_host),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    device = device_service.get_device(db, device_id)
    if not device:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Device not found')

    base_domain = match_base_domain(host_info.host, settings.base_domains)
    if host_info.host.lower() == base_domain:
        # Apex host has no entry label to replace.
        target_host = f'{device.device_id}.{base_domain}'
    else:
        target_host = build_redirect_host(host_info.host, device.device_id)

    host_port = join_host_port_if_needed(target_host, host_info.scheme, host_info.port)
    location = build_redirect_location(
        host_info.scheme,
        host_port,
        path,
        sid,
        param=settings.SESSION_QUERY_PARAM,
    )
    return RedirectResponse(location, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
