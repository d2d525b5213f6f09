from sqlalchemy import Boolean, Column, DateTime, Enum, String

from app.db.base import Base
from app.db.models.user import _new_id, _utcnow
from app.domain.catalog import ClientType


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_new_id)
    company_name = Column(String(255), nullable=False, index=True)
    client_type = Column(Enum(ClientType, native_enum=False, length=32), nullable=False)
    primary_contact_name = Column(String(255), nullable=False)
    primary_contact_email = Column(String(320), nullable=False)
    primary_contact_phone = Column(String(50), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )
