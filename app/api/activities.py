"""
Activity Data API router.

Read-only listing of a reporting period's activity entries together with the
values cached on them by the last recalculation.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db_session
from app.database.repositories import ReportingPeriodRepository
from app.pydantic_models.activity import ReportingPeriodActivitiesResponse

router = APIRouter(
    prefix="/api/v1/activities",
    tags=["Activities"],
)

logger = logging.getLogger(__name__)


@router.get("/{reporting_period_id}", response_model=ReportingPeriodActivitiesResponse)
async def list_reporting_period_activities(
    reporting_period_id: UUID,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Get all activity entries of a reporting period.

    Commuting co2e_calculated values are monthly averages.
    """
    repo = ReportingPeriodRepository(session)
    period = await repo.get_with_activities(reporting_period_id)

    if not period:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Reporting period {reporting_period_id} not found",
        )

    return ReportingPeriodActivitiesResponse(
        reporting_period_id=period.id,
        period_start=period.period_start,
        period_end=period.period_end,
        status=period.status,
        fuel=period.fuel_usage,
        vehicles=period.vehicle_usage,
        refrigerants=period.refrigerant_usage,
        electricity=period.electricity_usage,
        commuting=period.commuting_data,
    )
