from datetime import datetime

from pydantic import BaseModel, Field

from devgate.schemas.common import BaseSchema


class DeviceOut(BaseSchema):
    device_id: str
    mac: str | None = None
    ip: str
    description: str
    created_at: datetime
    updated_at: datetime


class DeviceUpsert(BaseModel):
    mac: str | None = Field(default=None, max_length=32)
    ip: str = Field(default='', max_length=45)
    description: str = ''


class DeviceDescriptionUpdate(BaseModel):
    description: str


class DeviceListResponse(BaseModel):
    items: list[DeviceOut]
    total: int
