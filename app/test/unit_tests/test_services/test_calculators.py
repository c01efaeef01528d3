"""
Service tests for emission calculators following kkb_fastapi pattern.
"""

from decimal import Decimal

import pytest

from app.services.calculators.commuting_calculator import (
    calculate_annual_commuting_emissions,
    calculate_commuting_emissions,
    work_days_per_year,
)
from app.services.calculators.electricity_calculator import calculate_electricity_emissions
from app.services.calculators.fuel_calculator import (
    calculate_fuel_emissions,
    calculate_vehicle_emissions,
)
from app.services.calculators.gas_converter import (
    DEFAULT_GWP,
    ZERO_EMISSIONS,
    GWPValues,
    to_co2e,
)
from app.services.calculators.refrigerant_calculator import calculate_refrigerant_emissions
from app.services.calculators.unit_converter import UnitConverter
from app.utils.constants import FuelType, GridRegion, RefrigerantType, TransportMode
from app.utils.exceptions import InvalidActivityDataError


def test_to_co2e_weights_gases_by_gwp():
    """Test CO2e = CO2 + CH4 * 25 + N2O * 298 with default GWP values."""
    assert to_co2e(1.0, 0.1, 0.01) == pytest.approx(1.0 + 2.5 + 2.98)


def test_to_co2e_with_injected_gwp():
    """Test a different GWP vintage changes CH4/N2O weighting only."""
    ar6 = GWPValues(ch4=27.9, n2o=273)
    assert to_co2e(2.0, gwp=ar6) == 2.0
    assert to_co2e(0.0, 1.0, 1.0, gwp=ar6) == pytest.approx(27.9 + 273)


def test_to_co2e_negative_mass_raises():
    """Test negative gas masses are rejected."""
    with pytest.raises(InvalidActivityDataError):
        to_co2e(-1.0)


def test_unit_converter_normalize_number():
    """Test number parsing from strings with thousands separators."""
    assert UnitConverter.normalize_number("1,250.5") == 1250.5
    assert UnitConverter.normalize_number(Decimal("2.5")) == 2.5

    with pytest.raises(InvalidActivityDataError):
        UnitConverter.normalize_number("twelve")


@pytest.mark.parametrize(
    "fuel_type, combined_factor",
    [
        (FuelType.NATURAL_GAS, 0.0021),
        (FuelType.HEATING_OIL, 0.00274),
        (FuelType.PROPANE, 0.00163),
        (FuelType.DIESEL, 0.00269),
        (FuelType.GASOLINE, 0.00233),
    ],
)
def test_fuel_emissions_match_combined_factors(fuel_type, combined_factor):
    """Test per-gas fuel factors reproduce the published combined CO2e factors."""
    result = calculate_fuel_emissions(fuel_type, 1000)
    assert result.co2e == pytest.approx(1000 * combined_factor, rel=1e-5)
    assert result.ch4 > 0
    assert result.n2o > 0


def test_fuel_emissions_unknown_fuel_is_zero():
    """Test an unrecognized fuel contributes zero without raising."""
    assert calculate_fuel_emissions("coal", 1000) == ZERO_EMISSIONS
    assert calculate_fuel_emissions(None, 1000) == ZERO_EMISSIONS


def test_fuel_emissions_gwp_sensitivity():
    """Test fuel CO2e follows the injected GWP values while CO2 does not."""
    default = calculate_fuel_emissions("diesel", 1000, gwp=DEFAULT_GWP)
    higher = calculate_fuel_emissions("diesel", 1000, gwp=GWPValues(ch4=250, n2o=2980))
    assert higher.co2 == default.co2
    assert higher.co2e > default.co2e


def test_vehicle_emissions_use_fuel_factors():
    """Test vehicle fuel consumption uses the stationary fuel factors."""
    assert calculate_vehicle_emissions("diesel", 500) == calculate_fuel_emissions("diesel", 500)


def test_vehicle_without_fuel_consumed_is_zero():
    """Test a mileage-only vehicle entry contributes zero."""
    assert calculate_vehicle_emissions("diesel", None) == ZERO_EMISSIONS


def test_refrigerant_emissions():
    """Test leaked kg times GWP / 1e6."""
    result = calculate_refrigerant_emissions("R_410A", 10)
    assert result.co2e == pytest.approx(10 * 2088 / 1_000_000)
    assert result.ch4 == 0
    assert result.n2o == 0


def test_refrigerant_emissions_unknown_or_missing_is_zero():
    """Test unknown refrigerants and missing leaked quantities contribute zero."""
    assert calculate_refrigerant_emissions("R_22", 10) == ZERO_EMISSIONS
    assert calculate_refrigerant_emissions("R_410A", None) == ZERO_EMISSIONS


def test_electricity_emissions_regional_grid():
    """Test kWh times the regional grid factor."""
    assert calculate_electricity_emissions(1000, GridRegion.LUZON).co2e == pytest.approx(0.65)
    assert calculate_electricity_emissions(1000, "mindanao_grid").co2e == pytest.approx(0.58)


@pytest.mark.parametrize("grid_region", [None, "atlantis_grid", "unknown"])
def test_electricity_emissions_default_grid(grid_region):
    """Test missing or unknown regions use the average grid factor, not zero."""
    result = calculate_electricity_emissions(1000, grid_region)
    assert result.co2e == pytest.approx(0.63)


def test_work_days_per_year():
    """Test (days_per_week - wfh_days) * 52."""
    assert work_days_per_year(5) == 260
    assert work_days_per_year(5, 2) == 156
    assert work_days_per_year(0) == 0


@pytest.mark.parametrize(
    "days_per_week, wfh_days",
    [(8, 0), (-1, 0), (5, -1), (3, 4)],
)
def test_work_days_per_year_rejects_invalid(days_per_week, wfh_days):
    """Test out-of-range days and more WFH days than work days are rejected."""
    with pytest.raises(InvalidActivityDataError):
        work_days_per_year(days_per_week, wfh_days)


def test_commuting_emissions_monthly_average():
    """Test 50 employees x 10 km x 2 x factor(car) x 260 days / 12."""
    result = calculate_commuting_emissions(50, 10, TransportMode.CAR, 5, 0)
    expected = 50 * 10 * 2 * 0.00017 * 260 / 12
    assert result.co2e == pytest.approx(expected)


def test_commuting_monthly_is_annual_over_twelve():
    """Test the returned figure is the annual total divided by 12."""
    annual = calculate_annual_commuting_emissions(30, 12.5, "bus", 5, 1)
    monthly = calculate_commuting_emissions(30, 12.5, "bus", 5, 1)
    assert monthly.co2e == pytest.approx(annual.co2e / 12)


@pytest.mark.parametrize("transport_mode", ["bicycle", "walking"])
def test_commuting_zero_emission_modes(transport_mode):
    """Test zero-emission modes return exactly zero."""
    result = calculate_commuting_emissions(100, 5, transport_mode, 5, 0)
    assert result.co2e == 0


def test_commuting_unknown_mode_is_zero():
    """Test unrecognized transport modes contribute zero."""
    assert calculate_commuting_emissions(100, 5, "hoverboard", 5, 0) == ZERO_EMISSIONS


def test_commuting_missing_distance_or_days_is_zero():
    """Test entries without distance or days per week contribute zero."""
    assert calculate_commuting_emissions(100, None, "car", 5, 0) == ZERO_EMISSIONS
    assert calculate_commuting_emissions(100, 10, "car", None, 0) == ZERO_EMISSIONS


def test_commuting_negative_inputs_raise():
    """Test negative employee counts and distances are rejected."""
    with pytest.raises(InvalidActivityDataError):
        calculate_commuting_emissions(-1, 10, "car", 5, 0)
    with pytest.raises(InvalidActivityDataError):
        calculate_commuting_emissions(10, -10, "car", 5, 0)


def test_commuting_wfh_days_reduce_emissions():
    """Test working from home reduces commuting emissions proportionally."""
    office = calculate_commuting_emissions(40, 8, "train", 5, 0)
    hybrid = calculate_commuting_emissions(40, 8, "train", 5, 2)
    assert hybrid.co2e == pytest.approx(office.co2e * 3 / 5)


# One calculator per activity category, each taking the scaled quantity
QUANTITY_CALCULATORS = {
    "fuel": lambda q: calculate_fuel_emissions("diesel", q),
    "vehicles": lambda q: calculate_vehicle_emissions("gasoline", q),
    "refrigerants": lambda q: calculate_refrigerant_emissions("R_410A", q),
    "electricity": lambda q: calculate_electricity_emissions(q, "visayas_grid"),
    "commuting_employees": lambda q: calculate_commuting_emissions(q, 10, "car", 5, 1),
    "commuting_distance": lambda q: calculate_commuting_emissions(50, q, "bus", 5, 0),
}


@pytest.mark.parametrize("category", QUANTITY_CALCULATORS)
def test_zero_quantity_is_zero(category):
    """Test a zero quantity yields exactly zero for every category."""
    assert QUANTITY_CALCULATORS[category](0) == ZERO_EMISSIONS


@pytest.mark.parametrize(
    "category, field",
    [
        ("fuel", "quantity"),
        ("vehicles", "quantity"),
        ("refrigerants", "quantity_leaked"),
        ("electricity", "kwh_consumption"),
        ("commuting_employees", "employee_count"),
        ("commuting_distance", "avg_distance_km"),
    ],
)
def test_negative_quantity_raises(category, field):
    """Test negative quantities are rejected and the offending field is named."""
    with pytest.raises(InvalidActivityDataError) as exc_info:
        QUANTITY_CALCULATORS[category](-5)
    assert exc_info.value.field == field


@pytest.mark.parametrize("category", QUANTITY_CALCULATORS)
def test_emissions_linear_in_quantity(category):
    """Test doubling the quantity doubles every gas."""
    calculate = QUANTITY_CALCULATORS[category]
    single = calculate(150)
    double = calculate(300)

    assert single.co2e > 0
    assert double.co2 == pytest.approx(2 * single.co2)
    assert double.ch4 == pytest.approx(2 * single.ch4)
    assert double.n2o == pytest.approx(2 * single.n2o)
    assert double.co2e == pytest.approx(2 * single.co2e)


@pytest.mark.parametrize("transport_mode", ["car", "motorcycle", "bus", "jeepney", "train"])
def test_commuting_linear_for_every_transport_mode(transport_mode):
    """Test commuting scales linearly in headcount for each emitting mode."""
    single = calculate_commuting_emissions(20, 7.5, transport_mode, 5, 0)
    double = calculate_commuting_emissions(40, 7.5, transport_mode, 5, 0)
    assert single.co2e > 0
    assert double.co2e == pytest.approx(2 * single.co2e)


@pytest.mark.parametrize("refrigerant_type", RefrigerantType.known())
def test_refrigerant_linear_for_every_refrigerant(refrigerant_type):
    """Test refrigerant emissions scale linearly in leaked kg for each known type."""
    single = calculate_refrigerant_emissions(refrigerant_type, 2.5)
    double = calculate_refrigerant_emissions(refrigerant_type, 5.0)
    assert single.co2e > 0
    assert double.co2e == pytest.approx(2 * single.co2e)
