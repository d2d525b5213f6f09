from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.models.client import Client as ClientModel
from app.domain.catalog import ClientType
from app.errors import NotFoundError


def get_client_by_id(db: Session, client_id: str) -> ClientModel | None:
    """Get a client by ID."""
    return db.query(ClientModel).filter(ClientModel.id == client_id).first()


def count_active_clients(db: Session) -> int:
    return db.query(ClientModel).filter(ClientModel.active.is_(True)).count()


def get_clients_paginated(
    db: Session,
    page: int = 1,
    page_size: int = 20,
    active: bool | None = None,
    client_type: ClientType | None = None,
    search: str | None = None,
) -> tuple[list[ClientModel], int]:
    """Get clients with pagination, newest first."""
    query = db.query(ClientModel)
    if active is not None:
        query = query.filter(ClientModel.active.is_(active))
    if client_type is not None:
        query = query.filter(ClientModel.client_type == client_type)
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(
                ClientModel.company_name.ilike(pattern),
                ClientModel.primary_contact_email.ilike(pattern),
            )
        )
    total = query.count()
    skip = (page - 1) * page_size
    clients = (
        query.order_by(ClientModel.created_at.desc(), ClientModel.company_name)
        .offset(skip)
        .limit(page_size)
        .all()
    )
    return clients, total


def create_client(
    db: Session,
    company_name: str,
    client_type: ClientType,
    primary_contact_name: str,
    primary_contact_email: str,
    primary_contact_phone: str | None = None,
) -> ClientModel:
    """Create a new client in the database."""
    db_client = ClientModel(
        company_name=company_name,
        client_type=client_type,
        primary_contact_name=primary_contact_name,
        primary_contact_email=primary_contact_email,
        primary_contact_phone=primary_contact_phone,
    )
    db.add(db_client)
    db.commit()
    db.refresh(db_client)
    return db_client


def update_client(db: Session, client_id: str, **fields) -> ClientModel:
    """Update client fields. Fields passed as None are left untouched."""
    client = get_client_by_id(db, client_id)
    if not client:
        raise NotFoundError("Client not found")

    for name, value in fields.items():
        if value is not None:
            setattr(client, name, value)

    db.commit()
    db.refresh(client)
    return client
