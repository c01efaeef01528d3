"""
Organization and Facility SQLAlchemy models.

Owned by the organization management layer; the calculation engine only
reads facility headcounts from them.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.database import Base


class OrganizationDBModel(Base):
    """Reporting organization."""

    __tablename__ = "organizations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    name = Column(String(200), nullable=False, comment="Organization name")

    industry = Column(String(100), nullable=True, comment="Industry sector")

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    facilities = relationship(
        "FacilityDBModel",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<OrganizationDBModel: {self.name}>"


class FacilityDBModel(Base):
    """Site of an organization. Headcounts are summed for per-employee metrics."""

    __tablename__ = "facilities"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    organization_id = Column(
        Uuid,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(200), nullable=False)

    location = Column(String(200), nullable=True)

    employee_count = Column(
        Integer,
        nullable=True,
        comment="Employees working at this facility",
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    organization = relationship("OrganizationDBModel", back_populates="facilities")

    def __repr__(self):
        return f"<FacilityDBModel: {self.name} ({self.employee_count} employees)>"
