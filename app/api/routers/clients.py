from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import app.repositories.client as client_repo
from app.api.deps import get_db, require_roles
from app.domain.catalog import ClientType
from app.domain.roles import PRODUCTION_ROLES
from app.schemas.client import Client, ClientCreate, ClientData, ClientUpdate
from app.schemas.envelope import Envelope
from app.schemas.pagination import PaginatedResponse
from app.services.client import (
    create_client,
    deactivate_client,
    get_client,
    update_client,
)

router = APIRouter(
    prefix="/clients",
    tags=["clients"],
    dependencies=[Depends(require_roles(PRODUCTION_ROLES))],
)


@router.get("", response_model=Envelope[PaginatedResponse[Client]])
def get_all_clients(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize", description="Items per page"),
    active: bool | None = Query(None),
    client_type: ClientType | None = Query(None, alias="clientType"),
    search: str | None = Query(None, description="Company name or contact email, partial match"),
    db: Session = Depends(get_db),
):
    clients, total = client_repo.get_clients_paginated(
        db,
        page=page,
        page_size=page_size,
        active=active,
        client_type=client_type,
        search=search,
    )
    return Envelope(
        data=PaginatedResponse(
            items=[Client.model_validate(client) for client in clients],
            total=total,
            page=page,
            page_size=page_size,
        )
    )


@router.post("", response_model=Envelope[ClientData], status_code=status.HTTP_201_CREATED)
def create_new_client(client_data: ClientCreate, db: Session = Depends(get_db)):
    client = create_client(db, client_data)
    return Envelope(data=ClientData(client=Client.model_validate(client)))


@router.get("/{client_id}", response_model=Envelope[ClientData])
def get_client_by_id(client_id: str, db: Session = Depends(get_db)):
    client = get_client(db, client_id)
    return Envelope(data=ClientData(client=Client.model_validate(client)))


@router.patch("/{client_id}", response_model=Envelope[ClientData])
def update_client_by_id(
    client_id: str,
    client_data: ClientUpdate,
    db: Session = Depends(get_db),
):
    client = update_client(db, client_id, client_data)
    return Envelope(data=ClientData(client=Client.model_validate(client)))


@router.delete("/{client_id}", response_model=Envelope[ClientData])
def deactivate_client_by_id(client_id: str, db: Session = Depends(get_db)):
    """Soft-delete: the client is kept but marked inactive."""
    client = deactivate_client(db, client_id)
    return Envelope(data=ClientData(client=Client.model_validate(client)))
