"""
Service tests for the emission factor table following kkb_fastapi pattern.
"""

import pytest
from pydantic import ValidationError

from app.services.factors.emission_factor_table import (
    EMISSION_FACTORS,
    FACTOR_TABLE_VERSION,
    get_grid_factor,
    get_transport_factor,
    list_factors,
    lookup_factor,
)
from app.utils.constants import FactorCategory, FuelType, GridRegion, RefrigerantType


def test_lookup_known_fuel_factor():
    """Test lookup of a fuel factor by raw code."""
    factor = lookup_factor(FactorCategory.FUEL, "diesel")

    assert factor is not None
    assert factor.subtype == FuelType.DIESEL.value
    assert factor.unit == "liters"
    assert factor.co2e() == pytest.approx(0.00269, rel=1e-5)


def test_lookup_refrigerant_carries_gwp():
    """Test refrigerant factors are GWP / 1e6 per kg."""
    factor = lookup_factor("refrigerant", "R_134a")

    assert factor.gwp == 1430
    assert factor.co2 == pytest.approx(0.00143)
    assert factor.ch4 == 0
    assert factor.n2o == 0


def test_lookup_never_raises():
    """Test unknown categories and subtypes return None."""
    assert lookup_factor(FactorCategory.FUEL, "plutonium") is None
    assert lookup_factor("livestock", "cattle") is None
    assert lookup_factor(FactorCategory.TRANSPORT, None) is None


def test_grid_factor_default():
    """Test missing and unknown grid regions resolve to the average grid."""
    assert get_grid_factor().subtype == GridRegion.PH_GRID_AVERAGE.value
    assert get_grid_factor("nowhere").co2 == 0.00063
    assert get_grid_factor("visayas_grid").co2 == 0.00061


def test_zero_emission_transport_modes():
    """Test bicycle and walking factors are exactly zero."""
    assert get_transport_factor("bicycle").co2 == 0.0
    assert get_transport_factor("walking").co2 == 0.0


def test_list_factors():
    """Test the full table and per-category listings."""
    assert len(list_factors()) == 20
    refrigerants = list_factors(FactorCategory.REFRIGERANT)
    assert [f.subtype for f in refrigerants] == [r.value for r in RefrigerantType.known()]


def test_factor_table_is_immutable():
    """Test the table and its factors cannot be modified."""
    with pytest.raises(TypeError):
        EMISSION_FACTORS[FactorCategory.FUEL][FuelType.DIESEL] = None

    factor = lookup_factor(FactorCategory.FUEL, "diesel")
    with pytest.raises(ValidationError):
        factor.co2 = 1.0


def test_all_factors_non_negative():
    """Test every factor value is non-negative."""
    for factor in list_factors():
        assert factor.co2 >= 0
        assert factor.ch4 >= 0
        assert factor.n2o >= 0


def test_factor_table_version():
    """Test the table is versioned."""
    assert FACTOR_TABLE_VERSION
