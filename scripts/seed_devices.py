#!/usr/bin/env python3
import argparse
import csv
from pathlib import Path

from devgate.db.session import SessionLocal, init_store
from devgate.services import device_service


def main() -> int:
    parser = argparse.ArgumentParser(description='Upsert devices from a CSV file (device_id,mac,ip,description).')
    parser.add_argument('csv_path', type=Path)
    args = parser.parse_args()

    init_store()

    with args.csv_path.open(encoding='utf-8', newline='') as handle:
        rows = [row for row in csv.DictReader(handle) if (row.get('device_id') or '').strip()]

    db = SessionLocal()
    try:
        for row in rows:
            device_service.save_or_update_device(
                db,
                device_id=row['device_id'].strip(),
                mac=row.get('mac'),
                ip=(row.get('ip') or '').strip(),
                description=(row.get('description') or '').strip(),
            )
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print(f'Upserted {len(rows)} device(s).')
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
