from sqlalchemy.orm import Session

import app.repositories.client as client_repo
from app.db.models.client import Client as ClientModel
from app.errors import NotFoundError
from app.schemas.client import ClientCreate, ClientUpdate


def get_client(db: Session, client_id: str) -> ClientModel:
    """
    Get a client by ID.

    Raises:
        NotFoundError: If client doesn't exist
    """
    client = client_repo.get_client_by_id(db, client_id)
    if not client:
        raise NotFoundError("Client not found")
    return client


def create_client(db: Session, data: ClientCreate) -> ClientModel:
    return client_repo.create_client(
        db,
        company_name=data.company_name,
        client_type=data.client_type,
        primary_contact_name=data.primary_contact_name,
        primary_contact_email=data.primary_contact_email,
        primary_contact_phone=data.primary_contact_phone,
    )


def update_client(db: Session, client_id: str, data: ClientUpdate) -> ClientModel:
    get_client(db, client_id)
    return client_repo.update_client(
        db,
        client_id,
        company_name=data.company_name,
        client_type=data.client_type,
        primary_contact_name=data.primary_contact_name,
        primary_contact_email=data.primary_contact_email,
        primary_contact_phone=data.primary_contact_phone,
    )


def deactivate_client(db: Session, client_id: str) -> ClientModel:
    """Soft-delete a client by clearing its active flag."""
    get_client(db, client_id)
    return client_repo.update_client(db, client_id, active=False)
