"""
Repository for ReportingPeriod database operations.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.repositories.base import BaseRepository
from app.database.schemas import ReportingPeriodDBModel

ACTIVITY_RELATIONSHIPS = (
    ReportingPeriodDBModel.fuel_usage,
    ReportingPeriodDBModel.vehicle_usage,
    ReportingPeriodDBModel.refrigerant_usage,
    ReportingPeriodDBModel.electricity_usage,
    ReportingPeriodDBModel.commuting_data,
)


class ReportingPeriodRepository(BaseRepository[ReportingPeriodDBModel]):
    """Repository for reporting period operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(ReportingPeriodDBModel, session)

    async def get_with_activities(
        self, reporting_period_id: UUID, for_update: bool = False
    ) -> Optional[ReportingPeriodDBModel]:
        """
        Load a reporting period with every activity entry eagerly loaded.

        Args:
            reporting_period_id: Reporting period UUID
            for_update: Lock the period row (SELECT ... FOR UPDATE) until the
                transaction ends; ignored by backends without row locks

        Returns:
            Reporting period with populated entry collections, or None
        """
        stmt = (
            select(ReportingPeriodDBModel)
            .where(ReportingPeriodDBModel.id == reporting_period_id)
            .options(*(selectinload(rel) for rel in ACTIVITY_RELATIONSHIPS))
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_by_organization(self, organization_id: UUID) -> list[ReportingPeriodDBModel]:
        """All reporting periods of an organization, oldest first."""
        stmt = (
            select(ReportingPeriodDBModel)
            .where(ReportingPeriodDBModel.organization_id == organization_id)
            .order_by(ReportingPeriodDBModel.period_start, ReportingPeriodDBModel.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
