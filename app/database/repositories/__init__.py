"""
Database repositories for data access layer.

Provides clean abstraction over database operations following repository pattern.
"""
from app.database.repositories.activity import ActivityRepository
from app.database.repositories.base import BaseRepository
from app.database.repositories.emission_calculation import EmissionCalculationRepository
from app.database.repositories.organization import OrganizationRepository
from app.database.repositories.reporting_period import ReportingPeriodRepository

__all__ = [
    "ActivityRepository",
    "BaseRepository",
    "EmissionCalculationRepository",
    "OrganizationRepository",
    "ReportingPeriodRepository",
]
