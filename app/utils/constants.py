"""
Application constants following kkb_fastapi pattern.
"""
from enum import Enum


class ConfigFile:
    """Configuration file paths."""
    PRODUCTION = "production.toml"
    DEVELOPMENT = "development.toml"
    TEST = "test.toml"


class Scope:
    """GHG Protocol Scope constants."""
    SCOPE_1 = 1
    SCOPE_2 = 2
    SCOPE_3 = 3


class ActivityCategory(str, Enum):
    """Activity categories recorded per reporting period."""
    FUEL = "fuel"
    VEHICLES = "vehicles"
    REFRIGERANTS = "refrigerants"
    ELECTRICITY = "electricity"
    COMMUTING = "commuting"


class FactorCategory(str, Enum):
    """Emission factor table categories."""
    FUEL = "fuel"
    REFRIGERANT = "refrigerant"
    ELECTRICITY_GRID = "electricity_grid"
    TRANSPORT = "transport"


class _SubtypeEnum(str, Enum):
    """
    Closed enum of subtype codes with an explicit UNKNOWN member.

    parse() never raises: codes outside the enum resolve to UNKNOWN so the
    calculators decide what an unrecognized code contributes.
    """

    @classmethod
    def parse(cls, raw: str | None):
        if raw is None:
            return cls.UNKNOWN
        try:
            return cls(raw.strip())
        except ValueError:
            return cls.UNKNOWN

    @classmethod
    def known(cls) -> list:
        return [member for member in cls if member.name != "UNKNOWN"]


class FuelType(_SubtypeEnum):
    """Stationary and mobile combustion fuels."""
    NATURAL_GAS = "natural_gas"
    HEATING_OIL = "heating_oil"
    PROPANE = "propane"
    DIESEL = "diesel"
    GASOLINE = "gasoline"
    UNKNOWN = "unknown"


class RefrigerantType(_SubtypeEnum):
    """Refrigerant blends tracked for leakage."""
    R_410A = "R_410A"
    R_134A = "R_134a"
    R_32 = "R_32"
    R_404A = "R_404A"
    UNKNOWN = "unknown"


class GridRegion(_SubtypeEnum):
    """Philippine electricity grids."""
    PH_GRID_AVERAGE = "ph_grid_average"
    LUZON = "luzon_grid"
    VISAYAS = "visayas_grid"
    MINDANAO = "mindanao_grid"
    UNKNOWN = "unknown"


class TransportMode(_SubtypeEnum):
    """Employee commuting transport modes."""
    CAR = "car"
    MOTORCYCLE = "motorcycle"
    BUS = "bus"
    JEEPNEY = "jeepney"
    TRAIN = "train"
    BICYCLE = "bicycle"
    WALKING = "walking"
    UNKNOWN = "unknown"


class FuelState(str, Enum):
    SOLID = "solid"
    LIQUID = "liquid"
    GAS = "gas"


class VehicleType(str, Enum):
    CAR = "car"
    TRUCK = "truck"
    VAN = "van"
    MOTORCYCLE = "motorcycle"
    BUS = "bus"
    OTHER = "other"


class RecordStatus(str, Enum):
    """Reporting period status. Not interpreted by the calculation engine."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    VALIDATED = "validated"
    ARCHIVED = "archived"


DEFAULT_GRID_REGION = GridRegion.PH_GRID_AVERAGE

# AR4/AR5-era 100-year global warming potentials
DEFAULT_GWP_CH4 = 25
DEFAULT_GWP_N2O = 298

# Decimal places applied when an emissions figure is stored
EMISSIONS_PRECISION = 4
# CH4 and N2O masses are orders of magnitude smaller than CO2e
GAS_MASS_PRECISION = 9

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12
ROUND_TRIP_FACTOR = 2
MAX_DAYS_PER_WEEK = 7
