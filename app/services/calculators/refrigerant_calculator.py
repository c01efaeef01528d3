"""
Refrigerant leakage calculator (Scope 1).

Formula:
    CO2e (tonnes) = quantity_leaked (kg) * GWP / 1,000,000

Only leaked or lost refrigerant is emissive; quantity purchased is kept on
the entry for record-keeping and never enters the formula. Refrigerants have
no separate CO2/CH4/N2O split, so the whole figure is reported as CO2.
"""

from decimal import Decimal

from app.services.calculators.gas_converter import ZERO_EMISSIONS, GasEmissions
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.emission_factor_table import get_refrigerant_factor
from app.utils.constants import RefrigerantType


def calculate_refrigerant_emissions(
    refrigerant_type: RefrigerantType | str | None,
    quantity_leaked: float | Decimal | None,
) -> GasEmissions:
    """
    Emissions from ``quantity_leaked`` kg of a refrigerant.

    Returns:
        GasEmissions in tonnes; zero for an unrecognized refrigerant or a
        missing leaked quantity

    Raises:
        InvalidActivityDataError: If quantity_leaked is negative
    """
    quantity_leaked = UnitConverter.non_negative(
        quantity_leaked, "quantity_leaked", default=0.0
    )

    factor = get_refrigerant_factor(refrigerant_type)
    if factor is None or quantity_leaked == 0:
        return ZERO_EMISSIONS

    co2e = quantity_leaked * factor.co2
    return GasEmissions(co2=co2e, co2e=co2e)
