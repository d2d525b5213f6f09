from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.models.user import _new_id, _utcnow
from app.domain.catalog import ProjectStatus, ProjectType


class Project(Base):
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    code = Column(String(32), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(ProjectType, native_enum=False, length=32), nullable=False)
    status = Column(
        Enum(ProjectStatus, native_enum=False, length=32),
        nullable=False,
        default=ProjectStatus.INQUIRY,
    )
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    archived_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    # Relationships
    client = relationship("Client", backref="projects")
    owner = relationship("User", backref="owned_projects")
