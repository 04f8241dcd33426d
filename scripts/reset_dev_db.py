#!/usr/bin/env python3
import argparse

from devgate.core.config import settings
from devgate.db.base import Base
from devgate.db.session import engine


def main() -> int:
    parser = argparse.ArgumentParser(description='Drop and recreate the device tables.')
    parser.add_argument('--yes', action='store_true', help='Required to execute destructive reset.')
    args = parser.parse_args()

    if not args.yes:
        raise SystemExit('Refusing to reset database. Re-run with --yes to confirm destructive action.')

    if settings.APP_ENV == 'production':
        raise SystemExit('Refusing to reset a production database.')

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    print('Development database reset completed.')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
