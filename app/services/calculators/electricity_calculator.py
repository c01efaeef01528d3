"""
Purchased electricity calculator (Scope 2).

Formula:
    CO2e (tonnes) = kwh_consumed * grid_factor(grid_region)

Unlike fuels and refrigerants, an unrecognized grid region is not treated as
zero: grid factors are reference data that must always resolve, so missing
or unknown regions use the national average grid.
"""

from decimal import Decimal

from app.services.calculators.gas_converter import ZERO_EMISSIONS, GasEmissions
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.emission_factor_table import get_grid_factor
from app.utils.constants import GridRegion


def calculate_electricity_emissions(
    kwh_consumed: float | Decimal,
    grid_region: GridRegion | str | None = None,
) -> GasEmissions:
    """
    Emissions from ``kwh_consumed`` of grid electricity.

    Args:
        kwh_consumed: Consumption in kWh
        grid_region: Grid code; None or unknown codes use the average grid

    Raises:
        InvalidActivityDataError: If kwh_consumed is negative

    Example:
        >>> calculate_electricity_emissions(1000).co2e
        0.63
    """
    kwh_consumed = UnitConverter.non_negative(kwh_consumed, "kwh_consumption")
    if kwh_consumed == 0:
        return ZERO_EMISSIONS

    factor = get_grid_factor(grid_region)
    co2e = kwh_consumed * factor.co2
    return GasEmissions(co2=co2e, co2e=co2e)
