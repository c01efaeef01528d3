"""
Fuel combustion calculators (Scope 1).

Stationary combustion (boilers, generators) and mobile combustion (fleet
vehicles) share the same per-fuel factors. Quantity must already be in the
factor's unit (liters, kg or cubic meters).

Formula:
    gas_mass = quantity * factor_gas(fuel_type), per gas
    CO2e = CO2 + CH4 * GWP_CH4 + N2O * GWP_N2O
"""

from decimal import Decimal

from app.services.calculators.gas_converter import (
    DEFAULT_GWP,
    ZERO_EMISSIONS,
    GasEmissions,
    GWPValues,
    gas_emissions,
)
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.emission_factor_table import get_fuel_factor
from app.utils.constants import FuelType


def calculate_fuel_emissions(
    fuel_type: FuelType | str | None,
    quantity: float | Decimal,
    gwp: GWPValues = DEFAULT_GWP,
) -> GasEmissions:
    """
    Emissions from burning ``quantity`` of a fuel.

    Returns:
        GasEmissions in tonnes; all zeros for an unrecognized fuel

    Raises:
        InvalidActivityDataError: If quantity is negative

    Example:
        >>> calculate_fuel_emissions("diesel", 1000).co2e
        2.690...
    """
    quantity = UnitConverter.non_negative(quantity, "quantity")

    factor = get_fuel_factor(fuel_type)
    if factor is None or quantity == 0:
        return ZERO_EMISSIONS

    return gas_emissions(
        co2=quantity * factor.co2,
        ch4=quantity * factor.ch4,
        n2o=quantity * factor.n2o,
        gwp=gwp,
    )


def calculate_vehicle_emissions(
    fuel_type: FuelType | str | None,
    fuel_consumed: float | Decimal | None,
    gwp: GWPValues = DEFAULT_GWP,
) -> GasEmissions:
    """
    Emissions from fuel consumed by a vehicle.

    A vehicle entry without ``fuel_consumed`` (mileage only) contributes zero.
    """
    if fuel_consumed is None:
        return ZERO_EMISSIONS
    return calculate_fuel_emissions(fuel_type, fuel_consumed, gwp=gwp)
