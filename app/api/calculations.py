"""
Emissions Calculations API router.

Trigger recalculation of reporting periods and read stored calculations.
Engine errors raised here are mapped to HTTP responses by the handlers
registered in create_app.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_db_session
from app.database.repositories import EmissionCalculationRepository
from app.pydantic_models.calculation import (
    EmissionCalculationPydModel,
    EmissionCalculationRequest,
    OrganizationRecalculationResponse,
)
from app.services.calculators.emission_calculator import EmissionCalculationService

router = APIRouter(
    prefix="/api/v1/calculations",
    tags=["Calculations"],
)

logger = logging.getLogger(__name__)


@router.post("", response_model=EmissionCalculationPydModel)
async def recalculate_reporting_period(
    request: EmissionCalculationRequest,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Recalculate a reporting period and return the stored calculation.

    Every activity entry's cached values are rewritten and the period's
    single calculation is created or overwritten.

    Example:
        ```
        POST /api/v1/calculations
        {"reporting_period_id": "3fa85f64-5717-4562-b3fc-2c963f66afa6"}
        ```

    Responses:
        404 if the reporting period does not exist,
        422 if an activity entry carries invalid values
    """
    logger.info(f"Recalculation requested for reporting period {request.reporting_period_id}")

    service = EmissionCalculationService(session)
    return await service.recalculate(request.reporting_period_id)


@router.get("/{reporting_period_id}", response_model=EmissionCalculationPydModel)
async def get_calculation(
    reporting_period_id: UUID,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Get the stored calculation of a reporting period.
    """
    repo = EmissionCalculationRepository(session)
    calculation = await repo.get_by_reporting_period_id(reporting_period_id)

    if not calculation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No calculation stored for reporting period {reporting_period_id}",
        )

    return calculation


@router.post(
    "/organizations/{organization_id}",
    response_model=OrganizationRecalculationResponse,
)
async def recalculate_organization(
    organization_id: UUID,
    session: AsyncSession = Depends(get_db_session),
):
    """
    Recalculate every reporting period of an organization.

    Periods that fail are reported with their error; the others are stored.
    """
    service = EmissionCalculationService(session)
    results = await service.recalculate_organization(organization_id)

    succeeded = sum(1 for r in results if r["status"] == "success")
    return OrganizationRecalculationResponse(
        organization_id=organization_id,
        total_periods=len(results),
        succeeded=succeeded,
        failed=len(results) - succeeded,
        results=results,
    )
