"""
Repository for Activity database operations.

Handles all activity categories (fuel, vehicles, refrigerants, electricity,
commuting) through one repository parameterized by category.
"""
from typing import Dict, Type, Union

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.repositories.base import BaseRepository
from app.database.schemas import (
    CommutingDataDBModel,
    ElectricityUsageDBModel,
    FuelUsageDBModel,
    RefrigerantUsageDBModel,
    VehicleUsageDBModel,
)
from app.services.calculators.gas_converter import GasEmissions
from app.utils.constants import ActivityCategory

ActivityModelType = Union[
    FuelUsageDBModel,
    VehicleUsageDBModel,
    RefrigerantUsageDBModel,
    ElectricityUsageDBModel,
    CommutingDataDBModel,
]


class ActivityRepository(BaseRepository[ActivityModelType]):
    """
    Repository for activity entries of one category.

    Supports every ActivityCategory.
    """

    MODEL_MAP: Dict[ActivityCategory, Type[ActivityModelType]] = {
        ActivityCategory.FUEL: FuelUsageDBModel,
        ActivityCategory.VEHICLES: VehicleUsageDBModel,
        ActivityCategory.REFRIGERANTS: RefrigerantUsageDBModel,
        ActivityCategory.ELECTRICITY: ElectricityUsageDBModel,
        ActivityCategory.COMMUTING: CommutingDataDBModel,
    }

    def __init__(
        self,
        session: AsyncSession,
        category: ActivityCategory | str = ActivityCategory.FUEL,
    ):
        """
        Initialize activity repository.

        Args:
            session: Async database session
            category: Activity category, e.g. 'fuel' or ActivityCategory.FUEL

        Raises:
            ValueError: If category is not recognized
        """
        try:
            category = ActivityCategory(category)
        except ValueError:
            raise ValueError(
                f"Invalid activity category: {category}. "
                f"Must be one of: {[c.value for c in self.MODEL_MAP]}"
            ) from None

        super().__init__(self.MODEL_MAP[category], session)
        self.category = category

    @staticmethod
    def set_cached_emissions(entry: ActivityModelType, emissions: GasEmissions) -> None:
        """
        Overwrite the engine-owned cached values of an entry, rounded for storage.

        The caller keeps the unrounded values for aggregation. Changes are
        flushed with the session.
        """
        emissions = emissions.rounded()
        entry.co2_emissions = emissions.co2
        entry.ch4_emissions = emissions.ch4
        entry.n2o_emissions = emissions.n2o
        entry.co2e_calculated = emissions.co2e
