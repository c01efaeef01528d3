"""
EmissionCalculation Repository.

put() is the single write path for calculation results: callers never choose
between create and update.
"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories.base import BaseRepository
from app.database.schemas import EmissionCalculationDBModel
from app.services.aggregators.emission_aggregator import CalculationSummary


def summary_to_columns(summary: CalculationSummary) -> dict:
    """Flatten a CalculationSummary into EmissionCalculationDBModel column values."""
    columns = {}
    for prefix, emissions in (
        ("scope1", summary.scope1),
        ("scope2", summary.scope2),
        ("scope3", summary.scope3),
        ("total", summary.total),
    ):
        for gas in ("co2", "ch4", "n2o", "co2e"):
            columns[f"{prefix}_{gas}"] = getattr(emissions, gas)

    columns.update(
        breakdown_by_category=dict(summary.breakdown_by_category),
        emission_factors_used=dict(summary.emission_factors_used),
        emissions_per_employee=summary.emissions_per_employee,
        total_employees=summary.total_employees,
        warnings=[w.model_dump(mode="json") for w in summary.warnings],
        gwp_values=summary.gwp.model_dump(),
        factor_table_version=summary.factor_table_version,
    )
    return columns


class EmissionCalculationRepository(BaseRepository[EmissionCalculationDBModel]):
    """Repository for per-period emission calculations."""

    def __init__(self, session: AsyncSession):
        super().__init__(EmissionCalculationDBModel, session)

    async def get_by_reporting_period_id(
        self, reporting_period_id: UUID
    ) -> Optional[EmissionCalculationDBModel]:
        """
        Get the stored calculation of a reporting period.

        Args:
            reporting_period_id: Reporting period UUID

        Returns:
            Calculation if one has been stored, None otherwise
        """
        stmt = select(EmissionCalculationDBModel).where(
            EmissionCalculationDBModel.reporting_period_id == reporting_period_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def put(
        self, reporting_period_id: UUID, summary: CalculationSummary
    ) -> EmissionCalculationDBModel:
        """
        Store the calculation of a reporting period.

        Creates the row when the period has none, otherwise overwrites every
        field of the existing row. calculated_at is refreshed either way. The
        caller owns the transaction; the write is flushed, not committed.

        Args:
            reporting_period_id: Reporting period UUID
            summary: Aggregated result to store

        Returns:
            The stored calculation
        """
        columns = summary_to_columns(summary)
        columns["calculated_at"] = datetime.utcnow()

        calculation = await self.get_by_reporting_period_id(reporting_period_id)
        if calculation is None:
            calculation = EmissionCalculationDBModel(
                reporting_period_id=reporting_period_id, **columns
            )
            self.session.add(calculation)
        else:
            for field, value in columns.items():
                setattr(calculation, field, value)

        await self.session.flush()
        await self.session.refresh(calculation)
        return calculation
