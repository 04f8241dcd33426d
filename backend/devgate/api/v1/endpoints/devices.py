from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from devgate.db.session import get_db
from devgate.schemas.device import DeviceDescriptionUpdate, DeviceListResponse, DeviceOut, DeviceUpsert
from devgate.services import device_service


router = APIRouter(prefix='/devices', tags=['devices'])


@router.get('', response_model=DeviceListResponse)
def list_devices(
    keyword: str | None = Query(default=None, max_length=255),
    db: Session = Depends(get_db),
) -> DeviceListResponse:
    devices = device_service.list_devices(db, keyword=keyword)
    return DeviceListResponse(items=[DeviceOut.model_validate(device) for device in devices], total=len(devices))


@router.get('/by-mac/{mac}', response_model=DeviceOut)
def get_device_by_mac(mac: str, db: Session = Depends(get_db)) -> DeviceOut:
    device = device_service.get_device_by_mac(db, mac)
    if not device:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Device not found')
    return DeviceOut.model_validate(device)


@router.get('/{device_id}', response_model=DeviceOut)
def get_device(device_id: str, db: Session = Depends(get_db)) -> DeviceOut:
    device = device_service.get_device(db, device_id)
    if not device:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Device not found')
    return DeviceOut.model_validate(device)


@router.put('/{device_id}', response_model=DeviceOut)
def upsert_device(device_id: str, payload: DeviceUpsert, db: Session = Depends(get_db)) -> DeviceOut:
    device = device_service.save_or_update_device(
        db,
        device_id=device_id,
        mac=payload.mac,
        description=payload.description,
        ip=payload.ip,
    )
    db.commit()
    return DeviceOut.model_validate(device)


@router.patch('/{device_id}', response_model=DeviceOut)
def update_device_description(
    device_id: str,
    payload: DeviceDescriptionUpdate,
    db: Session = Depends(get_db),
) -> DeviceOut:
    device = device_service.update_description(db, device_id=device_id, description=payload.description)
    if not device:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Device not found')
    db.commit()
    return DeviceOut.model_validate(device)


@router.delete('/{device_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_device(device_id: str, db: Session = Depends(get_db)) -> Response:
    if not device_service.delete_device(db, device_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Device not found')
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
