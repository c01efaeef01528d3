"""
Subtype resolution with audit warnings.

Unrecognized fuel, refrigerant and transport codes contribute zero emissions
and unrecognized grid regions fall back to the average grid. Either way the
calculation stays complete, but a typo like "disel" would silently
under-report. SubtypeResolver records a warning for every unrecognized code,
with the closest known code as a suggestion.
"""

import logging

from pydantic import BaseModel
from rapidfuzz import fuzz, process

from app.services.factors.emission_factor_table import SUBTYPE_ENUMS
from app.utils.constants import FactorCategory

logger = logging.getLogger(__name__)


class SubtypeWarning(BaseModel):
    """An unrecognized subtype code found during a calculation."""

    category: FactorCategory
    subtype: str | None
    policy: str
    suggestion: str | None = None
    message: str


class SubtypeResolver:
    """
    Parses raw subtype codes and collects warnings for unrecognized ones.

    One resolver is used per calculation; each distinct unrecognized code
    is reported once.
    """

    # Default fuzzy matching threshold (80%)
    DEFAULT_THRESHOLD = 80

    def __init__(self, threshold: int = DEFAULT_THRESHOLD):
        self.threshold = threshold
        self._warnings: dict[tuple[FactorCategory, str | None], SubtypeWarning] = {}

    @property
    def warnings(self) -> list[SubtypeWarning]:
        return list(self._warnings.values())

    def resolve(self, category: FactorCategory, raw: str | None):
        """
        Parse a raw code into its category's enum.

        Returns the enum member, which is UNKNOWN for unrecognized codes.
        Missing grid regions are expected and resolve to UNKNOWN silently.
        """
        enum_cls = SUBTYPE_ENUMS[category]
        parsed = enum_cls.parse(raw)

        if parsed is enum_cls.UNKNOWN:
            if category is FactorCategory.ELECTRICITY_GRID and raw is None:
                return parsed
            self._record(category, raw)

        return parsed

    def suggest(self, category: FactorCategory, raw: str | None) -> str | None:
        """
        Closest known code for ``raw`` using rapidfuzz.

        Returns:
            The suggested code if its score meets the threshold, None otherwise
        """
        if not raw:
            return None

        choices = [member.value for member in SUBTYPE_ENUMS[category].known()]
        result = process.extractOne(
            raw,
            choices,
            scorer=fuzz.ratio,
            processor=lambda value: value.lower().replace("-", "_"),
        )
        if result is None:
            return None

        matched, score, _ = result
        if score < self.threshold:
            return None
        return matched

    def _record(self, category: FactorCategory, raw: str | None):
        key = (category, raw)
        if key in self._warnings:
            return

        policy = (
            "default_grid"
            if category is FactorCategory.ELECTRICITY_GRID
            else "zero_emissions"
        )
        suggestion = self.suggest(category, raw)

        if policy == "default_grid":
            message = f"Unrecognized grid region '{raw}', used the average grid factor"
        else:
            message = f"Unrecognized {category.value} type '{raw}' contributed zero emissions"
        if suggestion:
            message += f" (did you mean '{suggestion}'?)"

        logger.warning(message)
        self._warnings[key] = SubtypeWarning(
            category=category,
            subtype=raw,
            policy=policy,
            suggestion=suggestion,
            message=message,
        )
