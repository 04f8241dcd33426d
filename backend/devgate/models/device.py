from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from devgate.db.base_class import Base
from devgate.models.mixins import TimestampMixin


class Device(TimestampMixin, Base):
    __tablename__ = 'devices'
    __table_args__ = (
        UniqueConstraint('mac', name='uq_devices_mac'),
    )

    # Globally unique and immutable; also the device's subdomain label.
    device_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    mac: Mapped[str | None] = mapped_column(String(17), nullable=True)
    ip: Mapped[str] = mapped_column(String(45), nullable=False, default='')
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')


Index('ix_devices_created_at', Device.created_at)
