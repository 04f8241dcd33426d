import logging
from collections.abc import Generator

from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from devgate.core.config import settings


logger = logging.getLogger(__name__)


class StoreInitError(RuntimeError):
    pass


def _engine_kwargs(database_url: str) -> dict:
    if database_url.startswith('sqlite'):
        # Request handlers run on a threadpool.
        return {'connect_args': {'check_same_thread': False}}
    return {'pool_pre_ping': True}


engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_store(bind: Engine | None = None) -> int:
    """
    Create the device schema if needed and return the number of stored devices.

    Connection and schema failures surface as ``StoreInitError`` so the owning
    process can decide whether to abort or retry.
    """
    from devgate.db.base import Base, Device

    bind = bind or engine
    try:
        Base.metadata.create_all(bind=bind)
        with Session(bind) as db:
            total = db.scalar(select(func.count()).select_from(Device))
    except SQLAlchemyError as exc:
        raise StoreInitError(f'device store initialization failed: {exc}') from exc

    logger.info('Device store ready, %d record(s)', total or 0)
    return int(total or 0)
