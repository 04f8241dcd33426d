from fastapi.testclient import TestClient


def test_health(client: TestClient) -> None:
    response = client.get('/api/v1/health')
    assert response.status_code == 200
    assert response.json() == {'status': 'ok', 'environment': 'test'}


def test_device_crud_flow(client: TestClient) -> None:
    created = client.put(
        '/api/v1/devices/lv99862',
        json={'mac': 'AA-BB-CC-DD-EE-01', 'ip': '10.0.0.2', 'description': 'Lab KVM'},
    )
    assert created.status_code == 200, created.text
    assert created.json()['mac'] == 'aa:bb:cc:dd:ee:01'

    fetched = client.get('/api/v1/devices/lv99862')
    assert fetched.status_code == 200
    assert fetched.json()['ip'] == '10.0.0.2'

    by_mac = client.get('/api/v1/devices/by-mac/aabbccddee01')
    assert by_mac.status_code == 200
    assert by_mac.json()['device_id'] == 'lv99862'

    patched = client.patch('/api/v1/devices/lv99862', json={'description': 'Desk KVM'})
    assert patched.status_code == 200
    assert patched.json()['description'] == 'Desk KVM'

    listing = client.get('/api/v1/devices', params={'keyword': 'Desk'})
    assert listing.json()['total'] == 1

    deleted = client.delete('/api/v1/devices/lv99862')
    assert deleted.status_code == 204
    assert client.get('/api/v1/devices/lv99862').status_code == 404
    assert client.delete('/api/v1/devices/lv99862').status_code == 404


def test_missing_devices_return_404(client: TestClient) -> None:
    assert client.get('/api/v1/devices/missing').status_code == 404
    assert client.get('/api/v1/devices/by-mac/00:00:00:00:00:00').status_code == 404
    assert client.patch('/api/v1/devices/missing', json={'description': 'x'}).status_code == 404


def test_upsert_conflicting_mac(client: TestClient, seeded_devices: None) -> None:
    response = client.put('/api/v1/devices/intruder', json={'mac': 'aa:bb:cc:dd:ee:02'})
    assert response.status_code == 409


def test_list_devices(client: TestClient, seeded_devices: None) -> None:
    payload = client.get('/api/v1/devices').json()
    assert payload['total'] == 2
    assert {item['device_id'] for item in payload['items']} == {'lv99862', 'rack07'}
