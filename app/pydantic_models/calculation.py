"""
Pydantic models for Emission Calculations following kkb_fastapi pattern.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class EmissionCalculationRequest(BaseModel):
    """Request model for recalculating a reporting period."""

    reporting_period_id: UUID = Field(
        ...,
        description="Reporting period to recalculate",
        examples=["3fa85f64-5717-4562-b3fc-2c963f66afa6"],
    )


class GasTotalsPydModel(BaseModel):
    """Emissions split by gas, in tonnes."""

    co2: float
    ch4: float
    n2o: float
    co2e: float


class SubtypeWarningPydModel(BaseModel):
    """Unrecognized subtype code reported by a calculation."""

    category: str
    subtype: str | None
    policy: str = Field(..., examples=["zero_emissions"])
    suggestion: str | None = Field(None, examples=["diesel"])
    message: str


class EmissionCalculationPydModel(BaseModel):
    """Model for emission calculation response. All figures in tonnes."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    reporting_period_id: UUID
    scope1_co2e: float = Field(..., examples=[24.4])
    scope2_co2e: float = Field(..., examples=[28.0])
    scope3_co2e: float = Field(
        ..., description="Employee commuting, monthly average", examples=[14.7]
    )
    total_co2e: float = Field(..., examples=[67.1])
    scope1_co2: float
    scope1_ch4: float
    scope1_n2o: float
    scope2_co2: float
    scope2_ch4: float
    scope2_n2o: float
    scope3_co2: float
    scope3_ch4: float
    scope3_n2o: float
    total_co2: float
    total_ch4: float
    total_n2o: float
    breakdown_by_category: dict[str, float] = Field(
        ...,
        examples=[
            {
                "fuel": 17.9,
                "vehicles": 6.0,
                "refrigerants": 0.5,
                "electricity": 28.0,
                "commuting": 14.7,
            }
        ],
    )
    emission_factors_used: dict[str, float] = Field(
        ..., examples=[{"diesel": 0.00269, "electricity_ph_grid_average": 0.00063}]
    )
    emissions_per_employee: float = Field(..., examples=[0.671])
    total_employees: int
    warnings: list[SubtypeWarningPydModel] = Field(default_factory=list)
    gwp_values: dict[str, float] = Field(..., examples=[{"ch4": 25, "n2o": 298}])
    factor_table_version: str
    calculated_at: datetime


class PeriodRecalculationResult(BaseModel):
    """Outcome of one reporting period in an organization-wide recalculation."""

    reporting_period_id: UUID
    status: str = Field(..., examples=["success"])
    total_co2e: float | None = None
    error: str | None = None


class OrganizationRecalculationResponse(BaseModel):
    """Response of an organization-wide recalculation."""

    organization_id: UUID
    total_periods: int
    succeeded: int
    failed: int
    results: list[PeriodRecalculationResult]
