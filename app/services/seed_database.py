"""
Database seeding service for loading a demo organization.

The demo reporting period reproduces the reference scenario: roughly
24.4 tCO2e Scope 1, 28.0 tCO2e Scope 2 and 14.7 tCO2e Scope 3 for an
organization of 100 employees.

Usage:
    from app.services.seed_database import DatabaseSeeder

    async with DatabaseSeeder() as seeder:
        await seeder.seed_all(clear_existing=True)
"""

import logging
from datetime import date
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories import (
    ActivityRepository,
    OrganizationRepository,
    ReportingPeriodRepository,
)
from app.database.schemas import (
    CommutingDataDBModel,
    ElectricityUsageDBModel,
    EmissionCalculationDBModel,
    FacilityDBModel,
    FuelUsageDBModel,
    OrganizationDBModel,
    RefrigerantUsageDBModel,
    ReportingPeriodDBModel,
    VehicleUsageDBModel,
)
from app.database.session_manager.db_session import Database
from app.services.calculators.emission_calculator import EmissionCalculationService
from app.utils.constants import ActivityCategory, RecordStatus

logger = logging.getLogger(__name__)

DEMO_ORGANIZATION = {"name": "Demo Manufacturing Corp.", "industry": "Manufacturing"}

DEMO_FACILITIES = [
    {"name": "Manila Plant", "location": "Manila", "employee_count": 60},
    {"name": "Cebu Office", "location": "Cebu", "employee_count": 40},
]

DEMO_PERIOD = {
    "period_start": date(2024, 1, 1),
    "period_end": date(2024, 12, 31),
    "status": RecordStatus.SUBMITTED.value,
    "scope_selection": {"scope1": True, "scope2": True, "scope3": True},
}

DEMO_ACTIVITIES: dict[ActivityCategory, list[dict[str, Any]]] = {
    ActivityCategory.FUEL: [
        {"fuel_type": "diesel", "fuel_state": "liquid", "quantity": 3903.35, "unit": "liters",
         "source_description": "Backup generators"},
        {"fuel_type": "gasoline", "fuel_state": "liquid", "quantity": 2274.68, "unit": "liters",
         "source_description": "Small equipment"},
        {"fuel_type": "natural_gas", "fuel_state": "gas", "quantity": 1000.0, "unit": "cubic_meters",
         "source_description": "Boiler"},
    ],
    ActivityCategory.VEHICLES: [
        {"vehicle_id": "TRK-001", "vehicle_type": "truck", "fuel_type": "diesel",
         "fuel_consumed": 1189.59, "mileage": 9800.0, "unit": "liters"},
        {"vehicle_id": "VAN-002", "vehicle_type": "van", "fuel_type": "gasoline",
         "fuel_consumed": 1201.72, "mileage": 11200.0, "unit": "liters"},
    ],
    ActivityCategory.REFRIGERANTS: [
        {"equipment_id": "AC-ROOF-1", "refrigerant_type": "R_410A", "quantity_leaked": 239.46,
         "quantity_purchased": 250.0, "unit": "kg", "leak_detection_log": []},
    ],
    ActivityCategory.ELECTRICITY: [
        {"meter_number": "MNL-0001", "kwh_consumption": 24153.85, "grid_region": "luzon_grid",
         "billing_period_start": date(2024, 1, 1), "billing_period_end": date(2024, 12, 31)},
        {"meter_number": "CEB-0001", "kwh_consumption": 20163.93, "grid_region": "visayas_grid",
         "billing_period_start": date(2024, 1, 1), "billing_period_end": date(2024, 12, 31)},
    ],
    ActivityCategory.COMMUTING: [
        {"employee_count": 48, "avg_distance_km": 23.19, "transport_mode": "car",
         "days_per_week": 5, "wfh_days": 0, "survey_date": date(2024, 6, 1)},
        {"employee_count": 75, "avg_distance_km": 25.0, "transport_mode": "bus",
         "days_per_week": 5, "wfh_days": 0, "survey_date": date(2024, 6, 1)},
    ],
}


class DatabaseSeeder:
    """Service for seeding the database with the demo organization."""

    def __init__(self, session: AsyncSession | None = None):
        """
        Initialize the database seeder.

        Args:
            session: Optional async database session. If not provided, will create one.
        """
        self._session = session
        self._external_session = session is not None

    async def __aenter__(self):
        """Context manager entry."""
        if not self._external_session:
            db = Database()
            self._session = await db.__aenter__()
            self._db_context = db
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if not self._external_session and hasattr(self, "_db_context"):
            await self._db_context.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        if not self._session:
            raise RuntimeError("Session not initialized. Use as context manager.")
        return self._session

    async def seed_all(
        self,
        clear_existing: bool = False,
        skip_calculations: bool = False,
    ) -> dict[str, Any]:
        """
        Seed the demo organization, its reporting period and activity entries.

        Args:
            clear_existing: If True, clear existing data before seeding
            skip_calculations: If True, do not recalculate the seeded period

        Returns:
            Dictionary with seeding statistics and, unless skipped, the
            stored calculation
        """
        logger.info("Starting database seeding")

        stats: dict[str, Any] = {
            "organizations": 0,
            "facilities": 0,
            "reporting_periods": 0,
            "activities": {category.value: 0 for category in ActivityCategory},
            "reporting_period_id": None,
            "calculation": None,
        }

        try:
            if clear_existing:
                await self._clear_existing_data()

            organization = await OrganizationRepository(self.session).create(**DEMO_ORGANIZATION)
            stats["organizations"] = 1

            for facility in DEMO_FACILITIES:
                self.session.add(FacilityDBModel(organization_id=organization.id, **facility))
            stats["facilities"] = len(DEMO_FACILITIES)

            period = await ReportingPeriodRepository(self.session).create(
                organization_id=organization.id, **DEMO_PERIOD
            )
            stats["reporting_periods"] = 1
            stats["reporting_period_id"] = period.id

            for category, entries in DEMO_ACTIVITIES.items():
                stats["activities"][category.value] = await self.seed_activities(
                    period.id, category, entries
                )

            await self.session.commit()

            if not skip_calculations:
                logger.info(f"Calculating emissions for reporting period {period.id}")
                service = EmissionCalculationService(self.session)
                stats["calculation"] = await service.recalculate(period.id)

            logger.info(f"Database seeding completed: {stats['activities']}")
            return stats

        except Exception as e:
            logger.error(f"Error during database seeding: {e}", exc_info=True)
            await self.session.rollback()
            raise

    async def seed_activities(
        self, reporting_period_id, category: ActivityCategory, entries: list[dict[str, Any]]
    ) -> int:
        """
        Create the activity entries of one category.

        Returns:
            Number of entries created
        """
        repo = ActivityRepository(self.session, category)
        for entry in entries:
            await repo.create(reporting_period_id=reporting_period_id, **entry)

        logger.info(f"Created {len(entries)} {category.value} entries")
        return len(entries)

    async def _clear_existing_data(self):
        """Clear all organizations, periods, entries and calculations."""
        logger.info("Clearing existing data")

        # Children first so backends without enforced cascades stay consistent
        for model in (
            EmissionCalculationDBModel,
            CommutingDataDBModel,
            ElectricityUsageDBModel,
            RefrigerantUsageDBModel,
            VehicleUsageDBModel,
            FuelUsageDBModel,
            ReportingPeriodDBModel,
            FacilityDBModel,
            OrganizationDBModel,
        ):
            await self.session.execute(delete(model))

        await self.session.commit()
        logger.info("Existing data cleared")
