"""
Gas-to-CO2e conversion.

Formula:
    CO2e = CO2 + (CH4 * GWP_CH4) + (N2O * GWP_N2O)

GWP multipliers are carried in a GWPValues instance so that a different
vintage (e.g. AR6) can be injected without touching the calculators.
"""
import logging

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import get_environment_config
from app.utils.constants import (
    DEFAULT_GWP_CH4,
    DEFAULT_GWP_N2O,
    EMISSIONS_PRECISION,
    GAS_MASS_PRECISION,
)
from app.utils.exceptions import InvalidActivityDataError

logger = logging.getLogger(__name__)


class GWPValues(BaseModel):
    """100-year global warming potentials used for CO2e weighting."""

    model_config = ConfigDict(frozen=True)

    ch4: float = Field(DEFAULT_GWP_CH4, gt=0, description="GWP of methane")
    n2o: float = Field(DEFAULT_GWP_N2O, gt=0, description="GWP of nitrous oxide")


DEFAULT_GWP = GWPValues()


def get_gwp_from_config() -> GWPValues:
    """
    Read GWP values from the config file of the current environment.

    Returns:
        GWPValues from ``[emission_calculation]``, or DEFAULT_GWP when the
        file or keys are missing
    """
    try:
        section = get_environment_config().section("emission_calculation")
    except FileNotFoundError as e:
        logger.warning(f"Failed to read GWP values from config: {e}. Using defaults")
        return DEFAULT_GWP

    return GWPValues(
        ch4=section.get("gwp_ch4", DEFAULT_GWP_CH4),
        n2o=section.get("gwp_n2o", DEFAULT_GWP_N2O),
    )


class GasEmissions(BaseModel):
    """Emissions of one activity split by gas, in tonnes."""

    model_config = ConfigDict(frozen=True)

    co2: float = 0.0
    ch4: float = 0.0
    n2o: float = 0.0
    co2e: float = 0.0

    def __add__(self, other: "GasEmissions") -> "GasEmissions":
        return GasEmissions(
            co2=self.co2 + other.co2,
            ch4=self.ch4 + other.ch4,
            n2o=self.n2o + other.n2o,
            co2e=self.co2e + other.co2e,
        )

    def rounded(
        self,
        ndigits: int = EMISSIONS_PRECISION,
        gas_ndigits: int = GAS_MASS_PRECISION,
    ) -> "GasEmissions":
        """Copy rounded for storage; CH4 and N2O keep ``gas_ndigits`` places."""
        return GasEmissions(
            co2=round(self.co2, ndigits),
            ch4=round(self.ch4, gas_ndigits),
            n2o=round(self.n2o, gas_ndigits),
            co2e=round(self.co2e, ndigits),
        )


ZERO_EMISSIONS = GasEmissions()


def to_co2e(
    co2: float,
    ch4: float = 0.0,
    n2o: float = 0.0,
    gwp: GWPValues = DEFAULT_GWP,
) -> float:
    """
    Combine individual gas masses into a single CO2e figure.

    Raises:
        InvalidActivityDataError: If any mass is negative
    """
    for gas, mass in (("co2", co2), ("ch4", ch4), ("n2o", n2o)):
        if mass < 0:
            raise InvalidActivityDataError(
                f"{gas} mass must be non-negative, got {mass}", field=gas
            )
    return co2 + ch4 * gwp.ch4 + n2o * gwp.n2o


def gas_emissions(
    co2: float,
    ch4: float = 0.0,
    n2o: float = 0.0,
    gwp: GWPValues = DEFAULT_GWP,
) -> GasEmissions:
    """Build a GasEmissions with its CO2e derived from the gas masses."""
    return GasEmissions(
        co2=co2, ch4=ch4, n2o=n2o, co2e=to_co2e(co2, ch4, n2o, gwp=gwp)
    )
