from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from devgate.core.config import settings
from devgate.db.session import get_db
from devgate.models.device import Device
from devgate.multitenancy.host_info import ResolvedHostInfo, resolve_request_host_info
from devgate.multitenancy.tenant_resolution import is_valid_host, match_base_domain, resolve_device_host
from devgate.services import device_service


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceContext:
    device: Device
    host_info: ResolvedHostInfo
    base_domain: str


def get_host_info(request: Request) -> ResolvedHostInfo:
    return resolve_request_host_info(request, trust_proxy_headers=settings.TRUST_PROXY_HEADERS)


def require_allowed_host(host_info: ResolvedHostInfo = Depends(get_host_info)) -> ResolvedHostInfo:
    if not host_info.host:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Missing host header')
    if not is_valid_host(host_info.host):
        logger.debug('Rejected malformed host %r (raw=%s, forwarded=%s)', host_info.host, host_info.raw_host, host_info.forwarded_host)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Malformed host')
    if not match_base_domain(host_info.host, settings.base_domains):
        logger.debug('Rejected host %s (raw=%s, forwarded=%s)', host_info.host, host_info.raw_host, host_info.forwarded_host)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='Host is not under the service domain')
    return host_info


def get_device_context(
    request: Request,
    host_info: ResolvedHostInfo = Depends(require_allowed_host),
    db: Session = Depends(get_db),
) -> DeviceContext:
    resolution = resolve_device_host(host_info.host, base_domains=settings.base_domains)
    if resolution.kind != 'device' or not resolution.device_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Device not resolved')

    device = device_service.get_device(db, resolution.device_id)
    if not device:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Device not found')

    request.state.device_id = device.device_id
    return DeviceContext(device=device, host_info=host_info, base_domain=resolution.base_domain)
