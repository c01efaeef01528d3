"""
ReportingPeriod SQLAlchemy model.

A reporting period (emission record) is the unit of calculation: one
organization's activity entries over a bounded time window.
"""
import uuid
from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from app.database import Base
from app.utils.constants import RecordStatus

_ENTRY_RELATIONSHIP_KW = {
    "back_populates": "reporting_period",
    "cascade": "all, delete-orphan",
    "passive_deletes": True,
}


class ReportingPeriodDBModel(Base):
    """
    Reporting period holding all activity entries of one window.

    period_start < period_end strictly; status is owned by the workflow
    layer and ignored by the calculation engine.
    """

    __tablename__ = "reporting_periods"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    organization_id = Column(
        Uuid,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    facility_id = Column(
        Uuid,
        ForeignKey("facilities.id", ondelete="SET NULL"),
        nullable=True,
        comment="Optional facility the period is scoped to",
    )

    period_start = Column(Date, nullable=False, comment="First day of the period")

    period_end = Column(Date, nullable=False, comment="Last day of the period")

    status = Column(
        String(20),
        nullable=False,
        default=RecordStatus.DRAFT.value,
        comment="draft, submitted, validated or archived",
    )

    scope_selection = Column(
        JSON,
        nullable=True,
        default=dict,
        comment="Scopes the organization reports for this period",
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    organization = relationship("OrganizationDBModel")

    fuel_usage = relationship(
        "FuelUsageDBModel",
        order_by="(FuelUsageDBModel.created_at, FuelUsageDBModel.id)",
        **_ENTRY_RELATIONSHIP_KW,
    )
    vehicle_usage = relationship(
        "VehicleUsageDBModel",
        order_by="(VehicleUsageDBModel.created_at, VehicleUsageDBModel.id)",
        **_ENTRY_RELATIONSHIP_KW,
    )
    refrigerant_usage = relationship(
        "RefrigerantUsageDBModel",
        order_by="(RefrigerantUsageDBModel.created_at, RefrigerantUsageDBModel.id)",
        **_ENTRY_RELATIONSHIP_KW,
    )
    electricity_usage = relationship(
        "ElectricityUsageDBModel",
        order_by="(ElectricityUsageDBModel.created_at, ElectricityUsageDBModel.id)",
        **_ENTRY_RELATIONSHIP_KW,
    )
    commuting_data = relationship(
        "CommutingDataDBModel",
        order_by="(CommutingDataDBModel.created_at, CommutingDataDBModel.id)",
        **_ENTRY_RELATIONSHIP_KW,
    )

    calculation = relationship(
        "EmissionCalculationDBModel",
        back_populates="reporting_period",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "period_start < period_end", name="ck_reporting_periods_start_before_end"
        ),
        Index("ix_reporting_periods_org_start", "organization_id", "period_start"),
        {"comment": "Reporting periods grouping activity data for one calculation"},
    )

    def __repr__(self):
        return (
            f"<ReportingPeriodDBModel: {self.period_start} to {self.period_end} "
            f"({self.status})>"
        )
