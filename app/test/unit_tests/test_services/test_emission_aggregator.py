"""
Service tests for emission aggregation following kkb_fastapi pattern.
"""

import pytest

from app.services.aggregators.emission_aggregator import (
    ActivityEmission,
    aggregate_emissions,
    calculate_emissions_per_employee,
    get_emission_factors_used,
)
from app.services.calculators.gas_converter import GasEmissions, GWPValues
from app.services.factors.subtype_resolver import SubtypeWarning
from app.utils.constants import ActivityCategory, FactorCategory


def co2e(value: float) -> GasEmissions:
    return GasEmissions(co2=value, co2e=value)


def scenario_activities() -> list[ActivityEmission]:
    """Entries of the reference scenario, with their CO2e already known."""
    entries = [
        (ActivityCategory.FUEL, "diesel", 10.5),
        (ActivityCategory.FUEL, "gasoline", 5.3),
        (ActivityCategory.FUEL, "natural_gas", 2.1),
        (ActivityCategory.VEHICLES, "diesel", 3.2),
        (ActivityCategory.VEHICLES, "gasoline", 2.8),
        (ActivityCategory.REFRIGERANTS, "R_410A", 0.5),
        (ActivityCategory.ELECTRICITY, None, 15.7),
        (ActivityCategory.ELECTRICITY, "luzon_grid", 12.3),
        (ActivityCategory.COMMUTING, "car", 8.2),
        (ActivityCategory.COMMUTING, "bus", 6.5),
    ]
    return [
        ActivityEmission(category=category, subtype=subtype, emissions=co2e(value))
        for category, subtype, value in entries
    ]


def test_aggregate_end_to_end_scenario():
    """Test scope totals, grand total, per-employee and breakdown of the reference scenario."""
    summary = aggregate_emissions(scenario_activities(), total_employees=100)

    assert summary.scope1.co2e == pytest.approx(24.4)
    assert summary.scope2.co2e == pytest.approx(28.0)
    assert summary.scope3.co2e == pytest.approx(14.7)
    assert summary.total_co2e == pytest.approx(67.1)
    assert summary.emissions_per_employee == pytest.approx(0.671)
    assert summary.total_employees == 100
    assert summary.breakdown_by_category == pytest.approx(
        {
            "fuel": 17.9,
            "vehicles": 6.0,
            "refrigerants": 0.5,
            "electricity": 28.0,
            "commuting": 14.7,
        }
    )


def test_aggregate_total_equals_sum_of_scopes():
    """Test the grand total equals scope1 + scope2 + scope3 within rounding."""
    summary = aggregate_emissions(scenario_activities(), total_employees=7)
    scopes = summary.scope1.co2e + summary.scope2.co2e + summary.scope3.co2e

    assert abs(summary.total.co2e - scopes) <= 1e-4


def test_aggregate_rounds_once_at_the_end():
    """Test values are summed unrounded and rounded to 4 decimals only when stored."""
    activities = [
        ActivityEmission(category=ActivityCategory.FUEL, subtype="diesel", emissions=co2e(0.00004))
        for _ in range(3)
    ]
    summary = aggregate_emissions(activities, total_employees=1)

    # Rounding each entry first would give 0.0
    assert summary.scope1.co2e == 0.0001
    assert summary.breakdown_by_category["fuel"] == 0.0001


def test_aggregate_per_gas_totals():
    """Test CO2, CH4 and N2O are aggregated alongside CO2e."""
    activities = [
        ActivityEmission(
            category=ActivityCategory.FUEL,
            subtype="diesel",
            emissions=GasEmissions(co2=2.0, ch4=0.5, n2o=0.25, co2e=2.0 + 12.5 + 74.5),
        ),
        ActivityEmission(category=ActivityCategory.ELECTRICITY, emissions=co2e(1.0)),
    ]
    summary = aggregate_emissions(activities, total_employees=10)

    assert summary.scope1.ch4 == 0.5
    assert summary.scope1.n2o == 0.25
    assert summary.total.co2 == 3.0
    assert summary.total.co2e == 90.0


def test_aggregate_keeps_gas_mass_precision():
    """Test trace CH4 and N2O masses survive storage rounding while CO2e keeps 4 decimals."""
    diesel_1000_litres = GasEmissions(co2=2.6807, ch4=0.00011, n2o=0.000022, co2e=2.690006)
    activities = [
        ActivityEmission(
            category=ActivityCategory.FUEL, subtype="diesel", emissions=diesel_1000_litres
        )
    ]
    summary = aggregate_emissions(activities, total_employees=1)

    assert summary.scope1.ch4 == pytest.approx(0.00011, abs=1e-12)
    assert summary.scope1.n2o == pytest.approx(0.000022, abs=1e-12)
    assert summary.total.n2o == pytest.approx(0.000022, abs=1e-12)
    assert summary.scope1.co2e == 2.69


def test_aggregate_empty_period():
    """Test an empty period yields zeros and still reports the default grid factor."""
    summary = aggregate_emissions([], total_employees=0)

    assert summary.total_co2e == 0
    assert summary.emissions_per_employee == 0
    assert set(summary.breakdown_by_category) == {c.value for c in ActivityCategory}
    assert summary.emission_factors_used == {"electricity_ph_grid_average": 0.00063}


def test_emissions_per_employee_zero_employees():
    """Test zero employees gives 0 instead of dividing by zero."""
    assert calculate_emissions_per_employee(67.1, 0) == 0
    assert calculate_emissions_per_employee(67.1, 100) == pytest.approx(0.671)


def test_emission_factors_used_keys():
    """Test factor audit keys per category."""
    factors_used = get_emission_factors_used(scenario_activities())

    assert factors_used["diesel"] == pytest.approx(0.00269, rel=1e-5)
    assert factors_used["R_410A"] == pytest.approx(0.002088)
    assert factors_used["electricity_luzon_grid"] == 0.00065
    assert factors_used["electricity_ph_grid_average"] == 0.00063
    assert factors_used["transport_car"] == 0.00017
    assert factors_used["transport_bus"] == 0.00008


def test_emission_factors_used_unknown_subtypes_recorded_as_zero():
    """Test unknown codes appear in the audit map with a zero factor."""
    activities = [
        ActivityEmission(category=ActivityCategory.FUEL, subtype="disel"),
        ActivityEmission(category=ActivityCategory.COMMUTING, subtype="hoverboard"),
        ActivityEmission(category=ActivityCategory.ELECTRICITY, subtype="atlantis_grid"),
    ]
    factors_used = get_emission_factors_used(activities)

    assert factors_used["disel"] == 0.0
    assert factors_used["transport_hoverboard"] == 0.0
    # Unknown grids fall back to, and are recorded as, the average grid
    assert factors_used == {
        "disel": 0.0,
        "transport_hoverboard": 0.0,
        "electricity_ph_grid_average": 0.00063,
    }


def test_aggregate_carries_warnings_and_gwp():
    """Test warnings and GWP values are carried into the summary."""
    warning = SubtypeWarning(
        category=FactorCategory.FUEL,
        subtype="disel",
        policy="zero_emissions",
        suggestion="diesel",
        message="Unrecognized fuel type 'disel' contributed zero emissions",
    )
    gwp = GWPValues(ch4=28, n2o=265)
    summary = aggregate_emissions([], total_employees=0, gwp=gwp, warnings=[warning])

    assert summary.warnings == [warning]
    assert summary.gwp == gwp
