"""
Quantity normalization utilities for emissions calculations.

The engine does not convert between physical units: quantities must already
be in the unit declared by their emission factor. These helpers only bring
numbers stored as Decimal or text into float form and reject negatives.
"""

from decimal import Decimal

from app.utils.exceptions import InvalidActivityDataError


class UnitConverter:
    """
    Stateless number normalization used by every calculator.
    """

    @staticmethod
    def normalize_number(value: str | float | int | Decimal) -> float:
        """
        Normalize a number value to float.

        Handles string inputs with commas, Decimals from Numeric columns,
        ints and floats.

        Example:
            >>> UnitConverter.normalize_number("1,234.56")
            1234.56
        """
        if isinstance(value, str):
            value = value.replace(",", "").strip()

        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise InvalidActivityDataError(f"Not a number: {value!r}") from e

    @staticmethod
    def non_negative(
        value: str | float | int | Decimal | None, field: str, default: float | None = None
    ) -> float | None:
        """
        Normalize ``value`` and reject negatives.

        Args:
            value: Raw quantity
            field: Field name reported in the error
            default: Returned when value is None

        Raises:
            InvalidActivityDataError: If the value is negative or not a number
        """
        if value is None:
            return default

        number = UnitConverter.normalize_number(value)
        if number < 0:
            raise InvalidActivityDataError(
                f"{field} must be non-negative, got {number}", field=field
            )
        return number
