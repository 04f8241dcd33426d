from devgate.db.base_class import Base
from devgate.models.device import Device


__all__ = [
    'Base',
    'Device',
]
