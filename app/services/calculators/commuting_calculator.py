"""
Employee commuting calculator (Scope 3).

Formula:
    work_days_per_year = (days_per_week - wfh_days) * 52
    annual = employee_count * avg_distance_km * 2 (round trip)
             * factor(transport_mode) * work_days_per_year
    monthly = annual / 12

The value returned (and cached on the entry) is the MONTHLY AVERAGE, not the
annual total. Anything displaying it must label it as per month.
"""

import logging
from decimal import Decimal

from app.services.calculators.gas_converter import ZERO_EMISSIONS, GasEmissions
from app.services.calculators.unit_converter import UnitConverter
from app.services.factors.emission_factor_table import get_transport_factor
from app.utils.constants import (
    MAX_DAYS_PER_WEEK,
    MONTHS_PER_YEAR,
    ROUND_TRIP_FACTOR,
    WEEKS_PER_YEAR,
    TransportMode,
)
from app.utils.exceptions import InvalidActivityDataError

logger = logging.getLogger(__name__)


def work_days_per_year(days_per_week: int, wfh_days: int = 0) -> int:
    """
    Annual commuting days.

    Raises:
        InvalidActivityDataError: If days_per_week is outside 0-7 or wfh_days
            is negative or exceeds days_per_week
    """
    if not 0 <= days_per_week <= MAX_DAYS_PER_WEEK:
        raise InvalidActivityDataError(
            f"days_per_week must be between 0 and {MAX_DAYS_PER_WEEK}, got {days_per_week}",
            field="days_per_week",
        )
    if wfh_days < 0:
        raise InvalidActivityDataError(
            f"wfh_days must be non-negative, got {wfh_days}", field="wfh_days"
        )
    if wfh_days > days_per_week:
        raise InvalidActivityDataError(
            f"wfh_days ({wfh_days}) cannot exceed days_per_week ({days_per_week})",
            field="wfh_days",
        )
    return (days_per_week - wfh_days) * WEEKS_PER_YEAR


def calculate_annual_commuting_emissions(
    employee_count: int,
    avg_distance_km: float | Decimal,
    transport_mode: TransportMode | str | None,
    days_per_week: int,
    wfh_days: int = 0,
) -> GasEmissions:
    """
    Annual commuting emissions for a group of employees sharing a profile.

    Returns:
        GasEmissions in tonnes per year; zero for zero-emission or
        unrecognized transport modes
    """
    employee_count = UnitConverter.non_negative(employee_count, "employee_count")
    avg_distance_km = UnitConverter.non_negative(avg_distance_km, "avg_distance_km")
    days = work_days_per_year(days_per_week, wfh_days or 0)

    factor = get_transport_factor(transport_mode)
    if factor is None or factor.co2 == 0:
        return ZERO_EMISSIONS

    annual_distance_km = employee_count * avg_distance_km * ROUND_TRIP_FACTOR * days
    co2e = annual_distance_km * factor.co2
    return GasEmissions(co2=co2e, co2e=co2e)


def calculate_commuting_emissions(
    employee_count: int,
    avg_distance_km: float | Decimal | None,
    transport_mode: TransportMode | str | None,
    days_per_week: int | None,
    wfh_days: int | None = 0,
) -> GasEmissions:
    """
    Monthly average commuting emissions.

    Entries without a distance or a days-per-week value contribute zero.

    Example:
        >>> calculate_commuting_emissions(50, 10, "car", 5, 0).co2e
        3.683...
    """
    if avg_distance_km is None or days_per_week is None:
        return ZERO_EMISSIONS

    annual = calculate_annual_commuting_emissions(
        employee_count, avg_distance_km, transport_mode, days_per_week, wfh_days or 0
    )
    if annual is ZERO_EMISSIONS:
        return ZERO_EMISSIONS
    return GasEmissions(
        co2=annual.co2 / MONTHS_PER_YEAR,
        ch4=annual.ch4 / MONTHS_PER_YEAR,
        n2o=annual.n2o / MONTHS_PER_YEAR,
        co2e=annual.co2e / MONTHS_PER_YEAR,
    )
