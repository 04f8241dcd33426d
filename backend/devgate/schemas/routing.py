from pydantic import BaseModel


class HostInfoOut(BaseModel):
    host: str
    port: str
    scheme: str
    raw_host: str
    forwarded_host: str
    forwarded_proto: str
    forwarded_port: str


class HostInfoResponse(BaseModel):
    host_info: HostInfoOut
    allowed: bool
    base_domain: str | None = None
    device_id: str | None = None
