from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings
from app.schemas.base import CamelModel
from app.schemas.envelope import Envelope

SERVICE_NAME = "production-management-api"

router = APIRouter(tags=["health"])


class HealthData(CamelModel):
    status: str
    service: str
    time: datetime


class VersionData(CamelModel):
    version: str


@router.get("/health", response_model=Envelope[HealthData])
def health():
    return Envelope(
        data=HealthData(status="ok", service=SERVICE_NAME, time=datetime.now(timezone.utc))
    )


@router.get("/version", response_model=Envelope[VersionData])
def version():
    return Envelope(data=VersionData(version=settings.app_version))
