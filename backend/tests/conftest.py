import os
from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = os.getenv('TEST_DATABASE_URL', 'sqlite://')

os.environ.setdefault('DATABASE_URL', TEST_DATABASE_URL)
os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('BASE_DOMAINS', 'example.com')
os.environ.setdefault('TRUST_PROXY_HEADERS', 'true')
os.environ.setdefault('SESSION_QUERY_PARAM', 'sid')

from devgate.db.base import Base
from devgate.db.session import get_db
from devgate.main import app
from devgate.services import device_service


if TEST_DATABASE_URL.startswith('sqlite'):
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(TEST_DATABASE_URL, pool_pre_ping=True)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    def _override_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_db

    with TestClient(app) as api_client:
        yield api_client

    app.dependency_overrides.clear()


@pytest.fixture()
def seeded_devices(db_session: Session) -> None:
    device_service.save_or_update_device(
        db_session, device_id='lv99862', mac='AA-BB-CC-DD-EE-01', description='Lab KVM', ip='10.0.0.2'
    )
    device_service.save_or_update_device(
        db_session, device_id='rack07', mac='aabb.ccdd.ee02', description='Rack 7 console', ip='10.0.0.7'
    )
    db_session.commit()
