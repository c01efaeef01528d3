"""
Repository for Organization and Facility reads.

The engine never writes organizations; it only needs their headcount.
"""
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories.base import BaseRepository
from app.database.schemas import FacilityDBModel, OrganizationDBModel


class OrganizationRepository(BaseRepository[OrganizationDBModel]):
    """Repository for organization operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(OrganizationDBModel, session)

    async def get_total_employees(self, organization_id: UUID) -> int:
        """
        Sum of employee_count over all facilities of an organization.

        Facilities without a headcount count as 0; an organization without
        facilities has 0 employees.
        """
        stmt = select(
            func.coalesce(func.sum(func.coalesce(FacilityDBModel.employee_count, 0)), 0)
        ).where(FacilityDBModel.organization_id == organization_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
