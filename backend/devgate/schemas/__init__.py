from devgate.schemas.device import DeviceDescriptionUpdate, DeviceListResponse, DeviceOut, DeviceUpsert
from devgate.schemas.routing import HostInfoOut, HostInfoResponse

__all__ = [
    'DeviceDescriptionUpdate',
    'DeviceListResponse',
    'DeviceOut',
    'DeviceUpsert',
    'HostInfoOut',
    'HostInfoResponse',
]
