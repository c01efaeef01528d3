"""
Main emission calculation orchestrator service - async version.

Recalculates a reporting period end to end: loads the period with all its
activity entries, computes every entry, writes the entries' cached values,
aggregates, and stores the period's single calculation row in one
transaction.
"""

import asyncio
import logging
from datetime import date
from typing import Any
from uuid import UUID
from weakref import WeakValueDictionary

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_environment_config
from app.database.repositories import (
    ActivityRepository,
    EmissionCalculationRepository,
    OrganizationRepository,
    ReportingPeriodRepository,
)
from app.database.schemas import EmissionCalculationDBModel, ReportingPeriodDBModel
from app.services.aggregators.emission_aggregator import (
    ActivityEmission,
    aggregate_emissions,
)
from app.services.calculators.commuting_calculator import calculate_commuting_emissions
from app.services.calculators.electricity_calculator import calculate_electricity_emissions
from app.services.calculators.fuel_calculator import (
    calculate_fuel_emissions,
    calculate_vehicle_emissions,
)
from app.services.calculators.gas_converter import GWPValues, get_gwp_from_config
from app.services.calculators.refrigerant_calculator import calculate_refrigerant_emissions
from app.services.factors.subtype_resolver import SubtypeResolver
from app.utils.constants import ActivityCategory, FactorCategory
from app.utils.exceptions import (
    EmissionCalculationError,
    EmissionEngineError,
    InvalidActivityDataError,
    InvalidReportingPeriodError,
    ReportingPeriodNotFoundError,
)

logger = logging.getLogger(__name__)

# Entry collection on ReportingPeriodDBModel per category, in aggregation order
ENTRY_COLLECTIONS = {
    ActivityCategory.FUEL: "fuel_usage",
    ActivityCategory.VEHICLES: "vehicle_usage",
    ActivityCategory.REFRIGERANTS: "refrigerant_usage",
    ActivityCategory.ELECTRICITY: "electricity_usage",
    ActivityCategory.COMMUTING: "commuting_data",
}

# One lock per reporting period for in-process serialization of recalculations
_period_locks: "WeakValueDictionary[UUID, asyncio.Lock]" = WeakValueDictionary()


def get_period_lock(reporting_period_id: UUID) -> asyncio.Lock:
    lock = _period_locks.get(reporting_period_id)
    if lock is None:
        lock = asyncio.Lock()
        _period_locks[reporting_period_id] = lock
    return lock


def get_fuzzy_threshold_from_config() -> int:
    """
    Get the "did you mean" suggestion threshold for the current environment.

    Returns:
        int: Threshold (0-100) from config, defaults to 80
    """
    try:
        section = get_environment_config().section("emission_calculation")
    except FileNotFoundError as e:
        logger.warning(
            f"Failed to read fuzzy_suggestion_threshold from config: {e}. Using default "
            f"{SubtypeResolver.DEFAULT_THRESHOLD}"
        )
        return SubtypeResolver.DEFAULT_THRESHOLD
    return int(
        section.get("fuzzy_suggestion_threshold", SubtypeResolver.DEFAULT_THRESHOLD)
    )


def validate_reporting_period(period_start: date, period_end: date) -> None:
    """
    Raises:
        InvalidReportingPeriodError: Unless period_start < period_end
    """
    if period_start >= period_end:
        raise InvalidReportingPeriodError(
            f"period_start ({period_start}) must be before period_end ({period_end})"
        )


def calculate_entry_emissions(
    category: ActivityCategory,
    entry,
    gwp: GWPValues,
    resolver: SubtypeResolver,
) -> ActivityEmission:
    """
    Calculate one activity entry.

    Unrecognized subtype codes are reported to ``resolver``; the calculators
    themselves apply the zero or default-grid fallback.

    Raises:
        InvalidActivityDataError: With the entry's category and id attached
    """
    try:
        if category is ActivityCategory.FUEL:
            subtype = entry.fuel_type
            resolver.resolve(FactorCategory.FUEL, subtype)
            emissions = calculate_fuel_emissions(subtype, entry.quantity, gwp=gwp)

        elif category is ActivityCategory.VEHICLES:
            subtype = entry.fuel_type
            resolver.resolve(FactorCategory.FUEL, subtype)
            emissions = calculate_vehicle_emissions(subtype, entry.fuel_consumed, gwp=gwp)

        elif category is ActivityCategory.REFRIGERANTS:
            subtype = entry.refrigerant_type
            resolver.resolve(FactorCategory.REFRIGERANT, subtype)
            emissions = calculate_refrigerant_emissions(subtype, entry.quantity_leaked)

        elif category is ActivityCategory.ELECTRICITY:
            subtype = entry.grid_region
            resolver.resolve(FactorCategory.ELECTRICITY_GRID, subtype)
            emissions = calculate_electricity_emissions(entry.kwh_consumption, subtype)

        else:
            subtype = entry.transport_mode
            resolver.resolve(FactorCategory.TRANSPORT, subtype)
            emissions = calculate_commuting_emissions(
                entry.employee_count,
                entry.avg_distance_km,
                subtype,
                entry.days_per_week,
                entry.wfh_days,
            )
    except InvalidActivityDataError as e:
        raise e.with_context(category.value, entry.id) from e

    return ActivityEmission(
        category=category, subtype=subtype, entry_id=entry.id, emissions=emissions
    )


class EmissionCalculationService:
    """
    Main orchestrator for emission calculations.

    Recalculations of the same reporting period never interleave: an
    in-process lock serializes them and the period row is locked with
    SELECT ... FOR UPDATE for the duration of the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        gwp: GWPValues | None = None,
        fuzzy_threshold: int | None = None,
    ):
        """
        Initialize service with database session.

        Args:
            session: Database session; the service commits or rolls back
                each recalculation on it
            gwp: Optional GWP override. If not provided, reads from config file.
            fuzzy_threshold: Optional suggestion threshold override.
                           If not provided, reads from config file.
        """
        self.session = session
        self.gwp = gwp if gwp is not None else get_gwp_from_config()
        self.fuzzy_threshold = (
            fuzzy_threshold
            if fuzzy_threshold is not None
            else get_fuzzy_threshold_from_config()
        )
        self.period_repo = ReportingPeriodRepository(session)
        self.organization_repo = OrganizationRepository(session)
        self.calculation_repo = EmissionCalculationRepository(session)
        logger.info(
            f"Initialized EmissionCalculationService with gwp_ch4={self.gwp.ch4}, "
            f"gwp_n2o={self.gwp.n2o}, fuzzy_threshold={self.fuzzy_threshold}"
        )

    async def recalculate(self, reporting_period_id: UUID) -> EmissionCalculationDBModel:
        """
        Recalculate a reporting period and store its calculation.

        Either every entry's cached values and the calculation row are
        written, or nothing is: on any error the transaction is rolled back
        and the previously stored calculation stays untouched.

        Args:
            reporting_period_id: Reporting period UUID

        Returns:
            The stored EmissionCalculationDBModel

        Raises:
            ReportingPeriodNotFoundError: If the period does not exist
            InvalidReportingPeriodError: If the period is not start < end
            InvalidActivityDataError: If an entry carries invalid values
            EmissionCalculationError: If the calculation fails unexpectedly

        Example:
            >>> service = EmissionCalculationService(session)
            >>> calculation = await service.recalculate(period_id)
            >>> print(f"Total: {calculation.total_co2e} tCO2e")
        """
        async with get_period_lock(reporting_period_id):
            try:
                calculation = await self._recalculate(reporting_period_id)
                await self.session.commit()

            except EmissionEngineError as e:
                await self.session.rollback()
                logger.warning(f"Recalculation of reporting period {reporting_period_id} rejected: {e}")
                raise

            except Exception as e:
                await self.session.rollback()
                logger.error(
                    f"Failed to recalculate reporting period {reporting_period_id}: {e}",
                    exc_info=True,
                )
                raise EmissionCalculationError(
                    reporting_period_id,
                    "Unexpected error during calculation",
                    original_exception=e,
                ) from e

        return calculation

    async def _recalculate(self, reporting_period_id: UUID) -> EmissionCalculationDBModel:
        period = await self.period_repo.get_with_activities(
            reporting_period_id, for_update=True
        )
        if period is None:
            raise ReportingPeriodNotFoundError(reporting_period_id)
        validate_reporting_period(period.period_start, period.period_end)

        total_employees = await self.organization_repo.get_total_employees(
            period.organization_id
        )

        # Compute everything before the first write
        resolver = SubtypeResolver(threshold=self.fuzzy_threshold)
        computed = [
            (entry, calculate_entry_emissions(category, entry, self.gwp, resolver))
            for category, entry in self._iter_entries(period)
        ]

        for entry, activity in computed:
            ActivityRepository.set_cached_emissions(entry, activity.emissions)

        summary = aggregate_emissions(
            [activity for _, activity in computed],
            total_employees,
            gwp=self.gwp,
            warnings=resolver.warnings,
        )
        calculation = await self.calculation_repo.put(period.id, summary)

        logger.info(
            f"Recalculated reporting period {reporting_period_id}: "
            f"{len(computed)} entries, total={calculation.total_co2e} tCO2e, "
            f"{len(summary.warnings)} warnings"
        )
        return calculation

    @staticmethod
    def _iter_entries(period: ReportingPeriodDBModel):
        for category, collection in ENTRY_COLLECTIONS.items():
            for entry in getattr(period, collection):
                yield category, entry

    async def recalculate_organization(self, organization_id: UUID) -> list[dict[str, Any]]:
        """
        Recalculate every reporting period of an organization.

        A failing period does not abort the batch; each period is committed
        or rolled back on its own.

        Args:
            organization_id: Organization UUID

        Returns:
            One dict per period with reporting_period_id, status
            ("success" or "error") and total_co2e or error

        Example:
            >>> results = await service.recalculate_organization(org_id)
            >>> failed = [r for r in results if r["status"] == "error"]
        """
        periods = await self.period_repo.list_by_organization(organization_id)
        period_ids = [period.id for period in periods]

        logger.info(
            f"Starting recalculation of {len(period_ids)} reporting periods "
            f"for organization {organization_id}"
        )

        results = []
        for period_id in period_ids:
            try:
                calculation = await self.recalculate(period_id)
                results.append(
                    {
                        "reporting_period_id": period_id,
                        "status": "success",
                        "total_co2e": calculation.total_co2e,
                    }
                )
            except EmissionEngineError as e:
                logger.error(f"Error recalculating reporting period {period_id}: {e}")
                results.append(
                    {
                        "reporting_period_id": period_id,
                        "status": "error",
                        "error": str(e),
                    }
                )

        succeeded = sum(1 for r in results if r["status"] == "success")
        logger.info(
            f"Organization {organization_id} recalculated: "
            f"{succeeded}/{len(results)} periods succeeded"
        )
        return results
