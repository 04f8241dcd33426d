from devgate.models.device import Device

__all__ = [
    'Device',
]
