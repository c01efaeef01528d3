"""
Compiled-in emission factor table.

Sources: EPA, IPCC AR5, Philippine Department of Energy 2024.
Units: tonnes of gas per physical unit (tCO2 / tCH4 / tN2O per unit).

Fuel factors are split by gas so their CO2e is derived through the GWP
weighting in gas_converter. Refrigerant, grid and transport factors only
exist as combined CO2e figures; those are carried in ``co2`` with CH4 and
N2O at zero.

The table is immutable. Publishing new values means bumping
FACTOR_TABLE_VERSION; calculations copy the factor values they used, so
stored results never change retroactively.
"""
import logging
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from app.services.calculators.gas_converter import DEFAULT_GWP, GWPValues, to_co2e
from app.utils.constants import (
    DEFAULT_GRID_REGION,
    FactorCategory,
    FuelType,
    GridRegion,
    RefrigerantType,
    TransportMode,
)

logger = logging.getLogger(__name__)

FACTOR_TABLE_VERSION = "2024.1"

# Refrigerant GWPs are published per kg; factors are stored per tonne basis
REFRIGERANT_GWP_DIVISOR = 1_000_000


class EmissionFactor(BaseModel):
    """One row of the factor table."""

    model_config = ConfigDict(frozen=True)

    category: FactorCategory
    subtype: str = Field(..., description="Subtype code, e.g. 'diesel' or 'R_410A'")
    co2: float = Field(..., ge=0, description="Tonnes CO2 (or combined CO2e) per unit")
    ch4: float = Field(0.0, ge=0, description="Tonnes CH4 per unit")
    n2o: float = Field(0.0, ge=0, description="Tonnes N2O per unit")
    unit: str
    source: str
    description: str
    gwp: int | None = Field(None, description="Refrigerant global warming potential")

    def co2e(self, gwp: GWPValues = DEFAULT_GWP) -> float:
        """CO2e per unit under the given GWP values."""
        return to_co2e(self.co2, self.ch4, self.n2o, gwp=gwp)


def _fuel(fuel_type, co2, ch4, n2o, unit, description):
    return EmissionFactor(
        category=FactorCategory.FUEL,
        subtype=fuel_type.value,
        co2=co2,
        ch4=ch4,
        n2o=n2o,
        unit=unit,
        source="EPA",
        description=description,
    )


def _refrigerant(refrigerant_type, gwp, description):
    return EmissionFactor(
        category=FactorCategory.REFRIGERANT,
        subtype=refrigerant_type.value,
        co2=gwp / REFRIGERANT_GWP_DIVISOR,
        unit="kg",
        source="IPCC AR5",
        description=description,
        gwp=gwp,
    )


def _grid(grid_region, factor, source, description):
    return EmissionFactor(
        category=FactorCategory.ELECTRICITY_GRID,
        subtype=grid_region.value,
        co2=factor,
        unit="kwh",
        source=source,
        description=description,
    )


def _transport(transport_mode, factor, source, description):
    return EmissionFactor(
        category=FactorCategory.TRANSPORT,
        subtype=transport_mode.value,
        co2=factor,
        unit="km",
        source=source,
        description=description,
    )


FUEL_FACTORS = MappingProxyType(
    {
        FuelType.NATURAL_GAS: _fuel(
            FuelType.NATURAL_GAS, 0.00209797, 3.7e-8, 3.7e-9,
            "cubic_meters", "Natural gas combustion",
        ),
        FuelType.HEATING_OIL: _fuel(
            FuelType.HEATING_OIL, 0.0027307, 1.1e-7, 2.2e-8,
            "liters", "Heating oil combustion",
        ),
        FuelType.PROPANE: _fuel(
            FuelType.PROPANE, 0.00162726, 5.0e-8, 5.0e-9,
            "kg", "Propane (LPG) combustion",
        ),
        FuelType.DIESEL: _fuel(
            FuelType.DIESEL, 0.0026807, 1.1e-7, 2.2e-8,
            "liters", "Diesel fuel combustion",
        ),
        FuelType.GASOLINE: _fuel(
            FuelType.GASOLINE, 0.00232154, 1.0e-7, 2.0e-8,
            "liters", "Gasoline combustion",
        ),
    }
)

REFRIGERANT_FACTORS = MappingProxyType(
    {
        RefrigerantType.R_410A: _refrigerant(RefrigerantType.R_410A, 2088, "R-410A refrigerant"),
        RefrigerantType.R_134A: _refrigerant(RefrigerantType.R_134A, 1430, "R-134a refrigerant"),
        RefrigerantType.R_32: _refrigerant(RefrigerantType.R_32, 675, "R-32 refrigerant"),
        RefrigerantType.R_404A: _refrigerant(RefrigerantType.R_404A, 3922, "R-404A refrigerant"),
    }
)

GRID_FACTORS = MappingProxyType(
    {
        GridRegion.PH_GRID_AVERAGE: _grid(
            GridRegion.PH_GRID_AVERAGE, 0.00063,
            "Philippine Department of Energy 2024",
            "Philippine grid average emission factor",
        ),
        GridRegion.LUZON: _grid(
            GridRegion.LUZON, 0.00065, "Philippine DOE 2024", "Luzon grid emission factor"
        ),
        GridRegion.VISAYAS: _grid(
            GridRegion.VISAYAS, 0.00061, "Philippine DOE 2024", "Visayas grid emission factor"
        ),
        GridRegion.MINDANAO: _grid(
            GridRegion.MINDANAO, 0.00058, "Philippine DOE 2024", "Mindanao grid emission factor"
        ),
    }
)

TRANSPORT_FACTORS = MappingProxyType(
    {
        TransportMode.CAR: _transport(TransportMode.CAR, 0.00017, "EPA", "Average passenger car"),
        TransportMode.MOTORCYCLE: _transport(TransportMode.MOTORCYCLE, 0.0001, "EPA", "Motorcycle"),
        TransportMode.BUS: _transport(TransportMode.BUS, 0.00008, "EPA", "Public bus"),
        TransportMode.JEEPNEY: _transport(
            TransportMode.JEEPNEY, 0.00009, "Philippines Transport Study", "Philippine jeepney"
        ),
        TransportMode.TRAIN: _transport(TransportMode.TRAIN, 0.00004, "EPA", "Rail/metro transit"),
        TransportMode.BICYCLE: _transport(
            TransportMode.BICYCLE, 0.0, "EPA", "Bicycle (zero emissions)"
        ),
        TransportMode.WALKING: _transport(
            TransportMode.WALKING, 0.0, "EPA", "Walking (zero emissions)"
        ),
    }
)

EMISSION_FACTORS: Mapping[FactorCategory, Mapping] = MappingProxyType(
    {
        FactorCategory.FUEL: FUEL_FACTORS,
        FactorCategory.REFRIGERANT: REFRIGERANT_FACTORS,
        FactorCategory.ELECTRICITY_GRID: GRID_FACTORS,
        FactorCategory.TRANSPORT: TRANSPORT_FACTORS,
    }
)

SUBTYPE_ENUMS = MappingProxyType(
    {
        FactorCategory.FUEL: FuelType,
        FactorCategory.REFRIGERANT: RefrigerantType,
        FactorCategory.ELECTRICITY_GRID: GridRegion,
        FactorCategory.TRANSPORT: TransportMode,
    }
)


def lookup_factor(
    category: FactorCategory | str, subtype: str | None
) -> EmissionFactor | None:
    """
    Find the factor for a (category, subtype) pair.

    Never raises: an unknown category or subtype returns None.
    """
    try:
        category = FactorCategory(category)
    except ValueError:
        logger.debug(f"Unknown factor category: {category}")
        return None

    parsed = SUBTYPE_ENUMS[category].parse(subtype)
    return EMISSION_FACTORS[category].get(parsed)


def get_fuel_factor(fuel_type: FuelType | str | None) -> EmissionFactor | None:
    """Factor for a fuel, or None if unrecognized."""
    return FUEL_FACTORS.get(FuelType.parse(fuel_type))


def get_refrigerant_factor(
    refrigerant_type: RefrigerantType | str | None,
) -> EmissionFactor | None:
    """Factor for a refrigerant, or None if unrecognized."""
    return REFRIGERANT_FACTORS.get(RefrigerantType.parse(refrigerant_type))


def get_grid_factor(grid_region: GridRegion | str | None = None) -> EmissionFactor:
    """
    Factor for an electricity grid.

    Always resolves: a missing or unrecognized region falls back to the
    national average grid.
    """
    return GRID_FACTORS.get(GridRegion.parse(grid_region), GRID_FACTORS[DEFAULT_GRID_REGION])


def get_transport_factor(
    transport_mode: TransportMode | str | None,
) -> EmissionFactor | None:
    """Factor for a commuting transport mode, or None if unrecognized."""
    return TRANSPORT_FACTORS.get(TransportMode.parse(transport_mode))


def list_factors(category: FactorCategory | None = None) -> list[EmissionFactor]:
    """All factors, optionally restricted to one category, in table order."""
    if category is not None:
        return list(EMISSION_FACTORS[category].values())
    return [
        factor
        for factors in EMISSION_FACTORS.values()
        for factor in factors.values()
    ]
