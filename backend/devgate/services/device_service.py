import logging
import re

from fastapi import HTTPException, status
from sqlalchemy import delete, func, or_, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from devgate.models.device import Device


logger = logging.getLogger(__name__)

_MAC_SEPARATORS = re.compile(r'[:\-.]')
_MAC_HEX = re.compile(r'^[0-9a-f]{12}$')

_UPSERT_INSERTS = {
    'postgresql': postgresql_insert,
    'sqlite': sqlite_insert,
}


def normalize_mac(mac: str | None) -> str | None:
    """
    Canonical MAC form used for storage and lookups: ``aa:bb:cc:dd:ee:ff``.

    Values that are not 12 hex digits are kept as given, trimmed and lowercased.
    """
    value = (mac or '').strip().lower()
    if not value:
        return None
    digits = _MAC_SEPARATORS.sub('', value)
    if not _MAC_HEX.match(digits):
        return value
    return ':'.join(digits[i : i + 2] for i in range(0, 12, 2))


def normalize_device_id(device_id: str) -> str:
    # Device IDs double as DNS labels, which compare case-insensitively.
    return device_id.strip().lower()


def get_device(db: Session, device_id: str) -> Device | None:
    return db.scalar(select(Device).where(Device.device_id == normalize_device_id(device_id)))


def get_device_by_mac(db: Session, mac: str) -> Device | None:
    normalized = normalize_mac(mac)
    if not normalized:
        return None
    return db.scalar(select(Device).where(Device.mac == normalized))


def list_devices(db: Session, *, keyword: str | None = None) -> list[Device]:
    query = select(Device)

    keyword = (keyword or '').strip()
    if keyword:
        query = query.where(
            or_(
                Device.device_id == normalize_device_id(keyword),
                Device.mac == normalize_mac(keyword),
                Device.description.like(f'%{keyword}%'),
            )
        )

    return list(db.scalars(query.order_by(Device.created_at.asc(), Device.device_id.asc())).all())


def _mac_owner(db: Session, mac: str) -> str | None:
    return db.scalar(select(Device.device_id).where(Device.mac == mac))


def save_or_update_device(
    db: Session,
    *,
    device_id: str,
    mac: str | None = None,
    description: str = '',
    ip: str = '',
) -> Device:
    device_id = normalize_device_id(device_id)
    normalized_mac = normalize_mac(mac)
    if normalized_mac:
        owner = _mac_owner(db, normalized_mac)
        if owner and owner != device_id:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='MAC already registered to another device')

    dialect = db.get_bind().dialect.name
    insert = _UPSERT_INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f'Upsert is not supported for dialect {dialect!r}')

    stmt = insert(Device).values(device_id=device_id, mac=normalized_mac, ip=ip, description=description)
    stmt = stmt.on_conflict_do_update(
        index_elements=[Device.device_id],
        set_={
            'mac': stmt.excluded.mac,
            'ip': stmt.excluded.ip,
            'description': stmt.excluded.description,
            'updated_at': func.now(),
        },
    )
    try:
        db.execute(stmt)
    except IntegrityError as exc:
        # A concurrent writer claimed the MAC between the ownership check and the upsert.
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail='MAC already registered to another device'
        ) from exc
    logger.debug('Upserted device %s (mac=%s, ip=%s)', device_id, normalized_mac, ip)

    return db.scalar(
        select(Device).where(Device.device_id == device_id).execution_options(populate_existing=True)
    )


def update_description(db: Session, *, device_id: str, description: str) -> Device | None:
    device = get_device(db, device_id)
    if not device:
        return None
    device.description = description
    db.flush()
    db.refresh(device)
    return device


def delete_device(db: Session, device_id: str) -> bool:
    result = db.execute(delete(Device).where(Device.device_id == normalize_device_id(device_id)))
    deleted = (result.rowcount or 0) > 0
    if deleted:
        logger.info('Deleted device %s', device_id)
    return deleted
