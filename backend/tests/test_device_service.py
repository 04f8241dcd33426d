import pytest
from fastapi import HTTPException
from sqlalchemy.orm import Session

from devgate.services import device_service


@pytest.mark.parametrize(
    ('mac', 'expected'),
    [
        ('AA:BB:CC:DD:EE:FF', 'aa:bb:cc:dd:ee:ff'),
        ('aa-bb-cc-dd-ee-ff', 'aa:bb:cc:dd:ee:ff'),
        ('aabb.ccdd.eeff', 'aa:bb:cc:dd:ee:ff'),
        (' AABBCCDDEEFF ', 'aa:bb:cc:dd:ee:ff'),
        ('not-a-mac', 'not-a-mac'),
        ('', None),
        (None, None),
    ],
)
def test_normalize_mac(mac: str | None, expected: str | None) -> None:
    assert device_service.normalize_mac(mac) == expected


def test_upsert_inserts_then_updates(db_session: Session) -> None:
    created = device_service.save_or_update_device(
        db_session, device_id='lv99862', mac='AA:BB:CC:DD:EE:01', description='Lab KVM', ip='10.0.0.2'
    )
    db_session.commit()
    assert created.mac == 'aa:bb:cc:dd:ee:01'
    assert created.created_at is not None

    updated = device_service.save_or_update_device(
        db_session, device_id='lv99862', mac='aa-bb-cc-dd-ee-01', description='Moved', ip='10.0.0.9'
    )
    db_session.commit()

    assert updated.device_id == 'lv99862'
    assert updated.ip == '10.0.0.9'
    assert updated.description == 'Moved'
    assert len(device_service.list_devices(db_session)) == 1


def test_upsert_rejects_mac_owned_by_other_device(db_session: Session, seeded_devices: None) -> None:
    with pytest.raises(HTTPException) as exc_info:
        device_service.save_or_update_device(db_session, device_id='intruder', mac='aa:bb:cc:dd:ee:01')
    assert exc_info.value.status_code == 409


def test_lookups_return_none_when_missing(db_session: Session, seeded_devices: None) -> None:
    assert device_service.get_device(db_session, 'missing') is None
    assert device_service.get_device_by_mac(db_session, '00:00:00:00:00:00') is None
    assert device_service.get_device_by_mac(db_session, '') is None


def test_lookup_by_mac_normalizes_input(db_session: Session, seeded_devices: None) -> None:
    device = device_service.get_device_by_mac(db_session, 'AABBCCDDEE02')
    assert device is not None
    assert device.device_id == 'rack07'


def test_list_devices_filters_by_keyword(db_session: Session, seeded_devices: None) -> None:
    assert {device.device_id for device in device_service.list_devices(db_session)} == {'lv99862', 'rack07'}
    assert [device.device_id for device in device_service.list_devices(db_session, keyword='lv99862')] == ['lv99862']
    assert [device.device_id for device in device_service.list_devices(db_session, keyword='AA-BB-CC-DD-EE-02')] == [
        'rack07'
    ]
    assert [device.device_id for device in device_service.list_devices(db_session, keyword='console')] == ['rack07']
    assert device_service.list_devices(db_session, keyword='nothing-here') == []


def test_update_description(db_session: Session, seeded_devices: None) -> None:
    device = device_service.update_description(db_session, device_id='rack07', description='Rack 7 (spare)')
    db_session.commit()
    assert device is not None
    assert device_service.get_device(db_session, 'rack07').description == 'Rack 7 (spare)'

    assert device_service.update_description(db_session, device_id='missing', description='x') is None


def test_delete_reports_whether_row_existed(db_session: Session, seeded_devices: None) -> None:
    assert device_service.delete_device(db_session, 'rack07') is True
    db_session.commit()
    assert device_service.get_device(db_session, 'rack07') is None
    assert device_service.delete_device(db_session, 'rack07') is False


def test_upsert_maps_unique_mac_violation_to_conflict(
    db_session: Session, seeded_devices: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    # Simulate a writer that slipped in after the ownership check.
    monkeypatch.setattr(device_service, '_mac_owner', lambda db, mac: None)

    with pytest.raises(HTTPException) as exc_info:
        device_service.save_or_update_device(db_session, device_id='intruder', mac='aa:bb:cc:dd:ee:01')
    assert exc_info.value.status_code == 409
    assert device_service.get_device(db_session, 'intruder') is None


def test_device_ids_are_case_insensitive(db_session: Session) -> None:
    device = device_service.save_or_update_device(db_session, device_id=' LV99862 ', ip='10.0.0.2')
    db_session.commit()

    assert device.device_id == 'lv99862'
    assert device_service.get_device(db_session, 'Lv99862') is not None
    assert device_service.delete_device(db_session, 'LV99862') is True


def test_upsert_refuses_unsupported_dialect(db_session: Session, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(device_service, '_UPSERT_INSERTS', {})

    with pytest.raises(RuntimeError):
        device_service.save_or_update_device(db_session, device_id='lv99862')
