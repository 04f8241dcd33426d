from devgate.services import device_service

__all__ = [
    'device_service',
]
