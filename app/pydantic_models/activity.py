"""
Pydantic models for Activity Data following kkb_fastapi pattern.

Read-only views of activity entries with their engine-owned cached values.
"""

from datetime import date as DateType
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CachedEmissionsMixin(BaseModel):
    """Cached values written by the last recalculation, tonnes."""

    co2_emissions: float | None = None
    ch4_emissions: float | None = None
    n2o_emissions: float | None = None
    co2e_calculated: float | None = None


class FuelUsagePydModel(CachedEmissionsMixin):
    """Stationary fuel entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    fuel_type: str
    fuel_state: str | None = None
    quantity: float
    unit: str
    entry_date: DateType | None = None
    source_description: str | None = None


class VehicleUsagePydModel(CachedEmissionsMixin):
    """Vehicle fuel entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    vehicle_id: str | None = None
    vehicle_type: str | None = None
    fuel_type: str
    fuel_consumed: float | None = None
    mileage: float | None = None
    unit: str
    entry_date: DateType | None = None


class RefrigerantUsagePydModel(CachedEmissionsMixin):
    """Refrigerant leakage entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    equipment_id: str | None = None
    refrigerant_type: str
    quantity_leaked: float | None = None
    quantity_purchased: float | None = None
    unit: str
    entry_date: DateType | None = None


class ElectricityUsagePydModel(CachedEmissionsMixin):
    """Purchased electricity entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    meter_number: str | None = None
    kwh_consumption: float
    grid_region: str | None = None
    billing_period_start: DateType
    billing_period_end: DateType


class CommutingDataPydModel(CachedEmissionsMixin):
    """Commuting survey entry. Cached values are monthly averages."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_count: int
    avg_distance_km: float | None = None
    transport_mode: str
    days_per_week: int | None = None
    wfh_days: int | None = None
    survey_date: DateType | None = None
    co2e_calculated: float | None = Field(
        None, description="Monthly average CO2e, not the annual total"
    )


class ReportingPeriodActivitiesResponse(BaseModel):
    """All activity entries of a reporting period."""

    reporting_period_id: UUID
    period_start: DateType
    period_end: DateType
    status: str
    fuel: list[FuelUsagePydModel]
    vehicles: list[VehicleUsagePydModel]
    refrigerants: list[RefrigerantUsagePydModel]
    electricity: list[ElectricityUsagePydModel]
    commuting: list[CommutingDataPydModel]
