"""
Pydantic models for EmissionFactor following kkb_fastapi pattern.
"""
from typing import Optional

from pydantic import BaseModel, Field


class EmissionFactorPydModel(BaseModel):
    """Model for emission factor response. Gas factors are tonnes per unit."""

    category: str = Field(..., description="fuel, refrigerant, electricity_grid or transport")
    subtype: str = Field(..., examples=["diesel"])
    co2: float
    ch4: float
    n2o: float
    co2e: float = Field(..., description="CO2e per unit with the configured GWP values")
    unit: str = Field(..., examples=["liters"])
    source: Optional[str] = None
    description: Optional[str] = None
    gwp: Optional[float] = Field(None, description="Refrigerant global warming potential")


class EmissionFactorListResponse(BaseModel):
    """Factor table listing."""

    factor_table_version: str
    factors: list[EmissionFactorPydModel]
