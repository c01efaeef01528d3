"""
Emission Aggregation Service.

Sums per-activity results of one reporting period into scope subtotals, a
grand total, a category breakdown, emissions per employee and an audit map of
the emission factors applied.

Rounding: sums accumulate unrounded values and every stored figure is
rounded once, to EMISSIONS_PRECISION decimal places, at the end. CH4 and N2O
masses keep GAS_MASS_PRECISION places so trace amounts are not lost.
"""

import logging
from uuid import UUID

from pydantic import BaseModel, Field

from app.services.calculators.gas_converter import (
    DEFAULT_GWP,
    ZERO_EMISSIONS,
    GasEmissions,
    GWPValues,
)
from app.services.factors.emission_factor_table import (
    FACTOR_TABLE_VERSION,
    get_fuel_factor,
    get_grid_factor,
    get_refrigerant_factor,
    get_transport_factor,
)
from app.services.factors.subtype_resolver import SubtypeWarning
from app.utils.constants import (
    DEFAULT_GRID_REGION,
    EMISSIONS_PRECISION,
    ActivityCategory,
    Scope,
)

logger = logging.getLogger(__name__)

SCOPE_CATEGORIES = {
    Scope.SCOPE_1: (
        ActivityCategory.FUEL,
        ActivityCategory.VEHICLES,
        ActivityCategory.REFRIGERANTS,
    ),
    Scope.SCOPE_2: (ActivityCategory.ELECTRICITY,),
    Scope.SCOPE_3: (ActivityCategory.COMMUTING,),
}


class ActivityEmission(BaseModel):
    """Calculated emissions of a single activity entry."""

    category: ActivityCategory
    subtype: str | None = Field(None, description="Raw subtype code of the entry")
    entry_id: UUID | None = None
    emissions: GasEmissions = ZERO_EMISSIONS


class CalculationSummary(BaseModel):
    """Aggregated result for one reporting period, rounded for storage."""

    scope1: GasEmissions
    scope2: GasEmissions
    scope3: GasEmissions
    total: GasEmissions
    breakdown_by_category: dict[str, float]
    emission_factors_used: dict[str, float]
    emissions_per_employee: float
    total_employees: int
    warnings: list[SubtypeWarning] = Field(default_factory=list)
    factor_table_version: str = FACTOR_TABLE_VERSION
    gwp: GWPValues = DEFAULT_GWP

    @property
    def total_co2e(self) -> float:
        return self.total.co2e


def round_emissions(value: float) -> float:
    """Round an emissions figure for storage."""
    return round(value, EMISSIONS_PRECISION)


def sum_emissions(emissions: list[GasEmissions]) -> GasEmissions:
    """Unrounded gas-by-gas sum."""
    total = ZERO_EMISSIONS
    for item in emissions:
        total = total + item
    return total


def calculate_emissions_per_employee(total_co2e: float, total_employees: int) -> float:
    """Total CO2e divided by headcount, 0 when there are no employees."""
    if total_employees <= 0:
        return 0.0
    return total_co2e / total_employees


def generate_breakdown(category_totals: dict[ActivityCategory, GasEmissions]) -> dict[str, float]:
    """CO2e per activity category, each rounded independently."""
    return {
        category.value: round_emissions(category_totals[category].co2e)
        for category in ActivityCategory
    }


def get_emission_factors_used(
    activities: list[ActivityEmission],
    gwp: GWPValues = DEFAULT_GWP,
) -> dict[str, float]:
    """
    Map every distinct subtype present to the per-unit CO2e factor applied.

    Unrecognized fuel, refrigerant and transport codes are recorded with 0.
    The average grid factor is always included, even without electricity
    entries.
    """
    factors_used: dict[str, float] = {}

    for activity in activities:
        subtype = activity.subtype or "unknown"

        if activity.category in (ActivityCategory.FUEL, ActivityCategory.VEHICLES):
            factor = get_fuel_factor(activity.subtype)
            factors_used[subtype] = factor.co2e(gwp) if factor else 0.0

        elif activity.category is ActivityCategory.REFRIGERANTS:
            factor = get_refrigerant_factor(activity.subtype)
            factors_used[subtype] = factor.co2e(gwp) if factor else 0.0

        elif activity.category is ActivityCategory.ELECTRICITY:
            factor = get_grid_factor(activity.subtype)
            factors_used[f"electricity_{factor.subtype}"] = factor.co2e(gwp)

        elif activity.category is ActivityCategory.COMMUTING:
            factor = get_transport_factor(activity.subtype)
            factors_used[f"transport_{subtype}"] = factor.co2e(gwp) if factor else 0.0

    default_grid = get_grid_factor(DEFAULT_GRID_REGION)
    factors_used[f"electricity_{default_grid.subtype}"] = default_grid.co2e(gwp)

    return factors_used


def aggregate_emissions(
    activities: list[ActivityEmission],
    total_employees: int,
    gwp: GWPValues = DEFAULT_GWP,
    warnings: list[SubtypeWarning] | None = None,
) -> CalculationSummary:
    """
    Aggregate all activity emissions of one reporting period.

    Args:
        activities: Per-entry results across all categories
        total_employees: Organization headcount for the per-employee metric
        gwp: GWP values the entry results were derived with
        warnings: Unrecognized subtype warnings collected while calculating

    Returns:
        CalculationSummary with every figure rounded for storage

    Example:
        >>> summary = aggregate_emissions(activities, total_employees=100)
        >>> summary.total.co2e
        67.1
    """
    category_totals = {
        category: sum_emissions(
            [a.emissions for a in activities if a.category is category]
        )
        for category in ActivityCategory
    }

    scope_totals = {
        scope: sum_emissions([category_totals[c] for c in categories])
        for scope, categories in SCOPE_CATEGORIES.items()
    }
    grand_total = sum_emissions(list(scope_totals.values()))

    summary = CalculationSummary(
        scope1=scope_totals[Scope.SCOPE_1].rounded(EMISSIONS_PRECISION),
        scope2=scope_totals[Scope.SCOPE_2].rounded(EMISSIONS_PRECISION),
        scope3=scope_totals[Scope.SCOPE_3].rounded(EMISSIONS_PRECISION),
        total=grand_total.rounded(EMISSIONS_PRECISION),
        breakdown_by_category=generate_breakdown(category_totals),
        emission_factors_used=get_emission_factors_used(activities, gwp),
        emissions_per_employee=round_emissions(
            calculate_emissions_per_employee(grand_total.co2e, total_employees)
        ),
        total_employees=total_employees,
        warnings=warnings or [],
        gwp=gwp,
    )

    logger.info(
        f"Aggregated {len(activities)} activities: "
        f"scope1={summary.scope1.co2e}, scope2={summary.scope2.co2e}, "
        f"scope3={summary.scope3.co2e}, total={summary.total.co2e} tCO2e"
    )

    return summary
