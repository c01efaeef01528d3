"""
Emission Factors API router.

Read-only view of the compiled-in emission factor table.
"""
import logging

from fastapi import APIRouter, HTTPException, status

from app.pydantic_models.emission_factor import (
    EmissionFactorListResponse,
    EmissionFactorPydModel,
)
from app.services.calculators.gas_converter import get_gwp_from_config
from app.services.factors.emission_factor_table import (
    FACTOR_TABLE_VERSION,
    EmissionFactor,
    list_factors,
    lookup_factor,
)
from app.utils.constants import FactorCategory

router = APIRouter(
    prefix="/api/v1/factors",
    tags=["Emission Factors"],
)

logger = logging.getLogger(__name__)


def to_pyd_model(factor: EmissionFactor) -> EmissionFactorPydModel:
    return EmissionFactorPydModel(
        category=factor.category.value,
        subtype=factor.subtype,
        co2=factor.co2,
        ch4=factor.ch4,
        n2o=factor.n2o,
        co2e=factor.co2e(get_gwp_from_config()),
        unit=factor.unit,
        source=factor.source,
        description=factor.description,
        gwp=factor.gwp,
    )


@router.get("/", response_model=EmissionFactorListResponse)
async def list_emission_factors(category: FactorCategory | None = None):
    """
    List the emission factor table.

    Args:
        category: Filter by factor category (optional)
    """
    factors = list_factors(category)
    return EmissionFactorListResponse(
        factor_table_version=FACTOR_TABLE_VERSION,
        factors=[to_pyd_model(factor) for factor in factors],
    )


@router.get("/{category}/{subtype}", response_model=EmissionFactorPydModel)
async def get_emission_factor(category: FactorCategory, subtype: str):
    """
    Get the factor for one subtype, e.g. /api/v1/factors/fuel/diesel.
    """
    factor = lookup_factor(category, subtype)

    if not factor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {category.value} emission factor for '{subtype}'",
        )

    return to_pyd_model(factor)
