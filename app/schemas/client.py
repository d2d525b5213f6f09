from datetime import datetime

from pydantic import EmailStr, Field

from app.domain.catalog import ClientType
from app.schemas.base import CamelModel


class Client(CamelModel):
    id: str
    company_name: str
    client_type: ClientType
    primary_contact_name: str
    primary_contact_email: str
    primary_contact_phone: str | None = None
    active: bool
    created_at: datetime
    updated_at: datetime


class ClientData(CamelModel):
    client: Client


class ClientCreate(CamelModel):
    company_name: str = Field(..., min_length=2, max_length=255)
    client_type: ClientType
    primary_contact_name: str = Field(..., min_length=2, max_length=255)
    primary_contact_email: EmailStr
    primary_contact_phone: str | None = Field(None, max_length=50)


class ClientUpdate(CamelModel):
    company_name: str | None = Field(None, min_length=2, max_length=255)
    client_type: ClientType | None = None
    primary_contact_name: str | None = Field(None, min_length=2, max_length=255)
    primary_contact_email: EmailStr | None = None
    primary_contact_phone: str | None = Field(None, max_length=50)
