"""
SQLAlchemy database models (schemas).
"""
from app.database.schemas.activity_data import (
    CommutingDataDBModel,
    ElectricityUsageDBModel,
    FuelUsageDBModel,
    RefrigerantUsageDBModel,
    VehicleUsageDBModel,
)
from app.database.schemas.emission_calculation import EmissionCalculationDBModel
from app.database.schemas.organization import FacilityDBModel, OrganizationDBModel
from app.database.schemas.reporting_period import ReportingPeriodDBModel

__all__ = [
    "CommutingDataDBModel",
    "ElectricityUsageDBModel",
    "EmissionCalculationDBModel",
    "FacilityDBModel",
    "FuelUsageDBModel",
    "OrganizationDBModel",
    "RefrigerantUsageDBModel",
    "ReportingPeriodDBModel",
    "VehicleUsageDBModel",
]
