"""
Emission engine exceptions.

Unknown reference data (an unrecognized fuel, refrigerant or transport code)
is deliberately not represented here: it resolves to a zero contribution and
a warning on the calculation instead of an error.
"""
from uuid import UUID


class EmissionEngineError(Exception):
    """Base class for calculation engine errors."""
    pass


class InvalidActivityDataError(EmissionEngineError):
    """
    Raised when an activity entry carries values the engine refuses to coerce,
    e.g. a negative quantity or more work-from-home days than work days.
    """

    def __init__(
        self,
        message: str,
        category: str | None = None,
        entry_id: UUID | None = None,
        field: str | None = None,
    ):
        self.category = category
        self.entry_id = entry_id
        self.field = field
        self.message = message

        prefix = ""
        if category:
            prefix = f"{category} entry {entry_id}: " if entry_id else f"{category}: "
        super().__init__(f"{prefix}{message}")

    def with_context(self, category: str, entry_id: UUID | None):
        """Return a copy of the error bound to a specific entry."""
        return InvalidActivityDataError(
            self.message, category=category, entry_id=entry_id, field=self.field
        )


class InvalidReportingPeriodError(EmissionEngineError):
    """Raised when a reporting period does not have start < end."""
    pass


class ReportingPeriodNotFoundError(EmissionEngineError):
    """Raised when recalculation is requested for a period that does not exist."""

    def __init__(self, reporting_period_id: UUID):
        self.reporting_period_id = reporting_period_id
        super().__init__(f"Reporting period {reporting_period_id} not found")


class EmissionCalculationError(EmissionEngineError):
    """
    Raised when a recalculation fails for an unexpected reason.

    Preserves the original exception so callers can log the cause.
    """

    def __init__(
        self,
        reporting_period_id: UUID,
        message: str,
        original_exception: Exception | None = None,
    ):
        self.reporting_period_id = reporting_period_id
        self.original_exception = original_exception
        self.message = message

        error_msg = (
            f"Failed to calculate emissions for reporting period "
            f"{reporting_period_id}: {message}"
        )
        if original_exception:
            error_msg += (
                f"\nCaused by: {type(original_exception).__name__}: "
                f"{original_exception}"
            )

        super().__init__(error_msg)
