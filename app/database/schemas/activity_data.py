"""
Activity data SQLAlchemy models.

One table per activity category, every entry belonging to a reporting period.
Subtype codes (fuel_type, refrigerant_type, grid_region, transport_mode) are
stored as the raw strings supplied so unrecognized codes stay auditable.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import declared_attr, relationship

from app.database import Base


class BaseActivityMixin:
    """
    Common columns of all activity entries.

    The cached emission columns are owned by the calculation engine and
    overwritten on every recalculation.
    """

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    @declared_attr
    def reporting_period_id(cls):
        return Column(
            Uuid,
            ForeignKey("reporting_periods.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    @declared_attr
    def reporting_period(cls):
        # __period_collection__ names the collection on ReportingPeriodDBModel
        return relationship(
            "ReportingPeriodDBModel", back_populates=cls.__period_collection__
        )

    # Engine-owned cached values, tonnes
    co2_emissions = Column(Numeric(16, 6, asdecimal=False), nullable=True)
    ch4_emissions = Column(Numeric(16, 9, asdecimal=False), nullable=True)
    n2o_emissions = Column(Numeric(16, 9, asdecimal=False), nullable=True)
    co2e_calculated = Column(
        Numeric(16, 6, asdecimal=False),
        nullable=True,
        comment="Calculated CO2e in tonnes",
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class FuelUsageDBModel(Base, BaseActivityMixin):
    """Stationary fuel combustion (Scope 1)."""

    __tablename__ = "fuel_usage"
    __period_collection__ = "fuel_usage"

    fuel_type = Column(String(50), nullable=False, comment="Fuel code, e.g. diesel")

    fuel_state = Column(String(20), nullable=True, comment="solid, liquid or gas")

    quantity = Column(Numeric(14, 4, asdecimal=False), nullable=False)

    unit = Column(String(20), nullable=False, default="liters")

    entry_date = Column(Date, nullable=True)

    source_description = Column(String(200), nullable=True)

    __table_args__ = ({"comment": "Stationary combustion activity data (Scope 1)"},)

    def __repr__(self):
        return f"<FuelUsageDBModel: {self.quantity} {self.unit} {self.fuel_type}>"


class VehicleUsageDBModel(Base, BaseActivityMixin):
    """Mobile combustion (Scope 1). Mileage is informational only."""

    __tablename__ = "vehicle_usage"
    __period_collection__ = "vehicle_usage"

    vehicle_id = Column(String(100), nullable=True)

    vehicle_type = Column(String(20), nullable=True)

    fuel_type = Column(String(50), nullable=False)

    fuel_consumed = Column(
        Numeric(14, 4, asdecimal=False),
        nullable=True,
        comment="Fuel consumed; entries without it contribute zero",
    )

    mileage = Column(Numeric(14, 2, asdecimal=False), nullable=True)

    unit = Column(String(20), nullable=False, default="liters")

    entry_date = Column(Date, nullable=True)

    __table_args__ = ({"comment": "Mobile combustion activity data (Scope 1)"},)

    def __repr__(self):
        return f"<VehicleUsageDBModel: {self.vehicle_id} {self.fuel_consumed} {self.unit}>"


class RefrigerantUsageDBModel(Base, BaseActivityMixin):
    """Fugitive refrigerant leakage (Scope 1)."""

    __tablename__ = "refrigerant_usage"
    __period_collection__ = "refrigerant_usage"

    equipment_id = Column(String(100), nullable=True)

    refrigerant_type = Column(String(50), nullable=False)

    quantity_leaked = Column(Numeric(14, 4, asdecimal=False), nullable=True)

    quantity_purchased = Column(
        Numeric(14, 4, asdecimal=False),
        nullable=True,
        comment="Record keeping only, never used in calculations",
    )

    unit = Column(String(20), nullable=False, default="kg")

    entry_date = Column(Date, nullable=True)

    leak_detection_log = Column(JSON, nullable=True, default=list)

    __table_args__ = ({"comment": "Fugitive emissions activity data (Scope 1)"},)

    def __repr__(self):
        return f"<RefrigerantUsageDBModel: {self.refrigerant_type} {self.quantity_leaked} {self.unit}>"


class ElectricityUsageDBModel(Base, BaseActivityMixin):
    """Purchased electricity (Scope 2)."""

    __tablename__ = "electricity_usage"
    __period_collection__ = "electricity_usage"

    facility_id = Column(
        Uuid,
        ForeignKey("facilities.id", ondelete="SET NULL"),
        nullable=True,
    )

    meter_number = Column(String(100), nullable=True)

    kwh_consumption = Column(Numeric(14, 2, asdecimal=False), nullable=False)

    peak_hours_kwh = Column(Numeric(14, 2, asdecimal=False), nullable=True)

    off_peak_kwh = Column(Numeric(14, 2, asdecimal=False), nullable=True)

    grid_region = Column(
        String(50),
        nullable=True,
        comment="Grid code; NULL uses the national average grid",
    )

    billing_period_start = Column(Date, nullable=False)

    billing_period_end = Column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "billing_period_start < billing_period_end",
            name="ck_electricity_usage_billing_start_before_end",
        ),
        {"comment": "Purchased electricity activity data (Scope 2)"},
    )

    def __repr__(self):
        return f"<ElectricityUsageDBModel: {self.kwh_consumption} kWh ({self.grid_region})>"


class CommutingDataDBModel(Base, BaseActivityMixin):
    """
    Employee commuting survey (Scope 3).

    co2e_calculated holds the MONTHLY AVERAGE of the annual commuting
    emissions, not the annual total.
    """

    __tablename__ = "commuting_data"
    __period_collection__ = "commuting_data"

    employee_count = Column(Integer, nullable=False)

    avg_distance_km = Column(
        Numeric(10, 2, asdecimal=False),
        nullable=True,
        comment="Average one-way distance in km",
    )

    transport_mode = Column(String(50), nullable=False)

    days_per_week = Column(Integer, nullable=True)

    wfh_days = Column(Integer, nullable=True, default=0)

    survey_date = Column(Date, nullable=True)

    notes = Column(Text, nullable=True)

    __table_args__ = ({"comment": "Employee commuting activity data (Scope 3)"},)

    def __repr__(self):
        return (
            f"<CommutingDataDBModel: {self.employee_count} employees by "
            f"{self.transport_mode}, {self.avg_distance_km} km>"
        )
