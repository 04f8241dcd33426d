#!/usr/bin/env python3
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = ROOT / 'backend'


def spawn_backend(port: str) -> subprocess.Popen:
    backend_cmd = [
        sys.executable,
        '-m',
        'uvicorn',
        'devgate.main:app',
        '--host',
        '0.0.0.0',
        '--port',
        port,
        '--proxy-headers',
        '--reload',
    ]
    return subprocess.Popen(backend_cmd, cwd=str(BACKEND_DIR), env=os.environ.copy())


def terminate_process(process: subprocess.Popen) -> None:
    if process.poll() is None:
        process.terminate()

    time.sleep(1)
    if process.poll() is None:
        process.kill()


def main() -> int:
    backend = spawn_backend(os.environ.get('DEVGATE_PORT', '8001'))

    def handle_signal(_sig: int, _frame: object) -> None:
        terminate_process(backend)
        raise SystemExit(0)

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    while True:
        if backend.poll() is not None:
            return backend.returncode or 0
        time.sleep(0.5)


if __name__ == '__main__':
    raise SystemExit(main())
