"""
Period calculation service.
Turns a cadence and a date into the canonical period key used to
deduplicate mission instances.
"""
from calendar import monthrange
from datetime import datetime, timedelta, date
from typing import Optional, Union

from horizon.constants import (
    CADENCE_DAILY, CADENCE_WEEKLY, CADENCE_MONTHLY, CADENCE_SEASONAL, CADENCES
)
from horizon.exceptions import ValidationException


class PeriodService:
    """Service for cadence period operations"""

    @staticmethod
    def today() -> date:
        """Current server-local date"""
        return datetime.now().date()

    @staticmethod
    def _as_date(moment: Optional[Union[date, datetime]]) -> date:
        if moment is None:
            return PeriodService.today()
        if isinstance(moment, datetime):
            return moment.date()
        return moment

    @staticmethod
    def validate_cadence(cadence: str) -> str:
        value = getattr(cadence, "value", cadence)
        if value not in CADENCES:
            raise ValidationException(
                "cadence", f"must be one of {', '.join(CADENCES)} (got {value!r})"
            )
        return value

    @staticmethod
    def get_period_key(cadence: str, moment: Optional[Union[date, datetime]] = None) -> str:
        """
        Get the period key for a cadence.

        All dates inside the same period map to the same key:
            daily    -> 2025-01-06
            weekly   -> 2025-W02 (ISO week and ISO week-year)
            monthly  -> 2025-01
            seasonal -> 2025-Q1

        Args:
            cadence: daily, weekly, monthly or seasonal
            moment: date or datetime to compute for (defaults to now)

        Returns:
            Period key string

        Raises:
            ValidationException: unknown cadence
        """
        cadence = PeriodService.validate_cadence(cadence)
        day = PeriodService._as_date(moment)

        if cadence == CADENCE_DAILY:
            return day.isoformat()

        if cadence == CADENCE_WEEKLY:
            iso_year, iso_week, _ = day.isocalendar()
            return f"{iso_year}-W{iso_week:02d}"

        if cadence == CADENCE_MONTHLY:
            return f"{day.year}-{day.month:02d}"

        quarter = (day.month - 1) // 3 + 1
        return f"{day.year}-Q{quarter}"

    @staticmethod
    def get_period_bounds(cadence: str, moment: Optional[Union[date, datetime]] = None) -> tuple[date, date]:
        """
        Get first and last calendar day of the period containing moment.

        Returns:
            Tuple of (first_day, last_day), both inclusive
        """
        cadence = PeriodService.validate_cadence(cadence)
        day = PeriodService._as_date(moment)

        if cadence == CADENCE_DAILY:
            return day, day

        if cadence == CADENCE_WEEKLY:
            start = day - timedelta(days=day.weekday())
            return start, start + timedelta(days=6)

        if cadence == CADENCE_MONTHLY:
            return day.replace(day=1), day.replace(day=monthrange(day.year, day.month)[1])

        first_month = ((day.month - 1) // 3) * 3 + 1
        last_month = first_month + 2
        return (
            date(day.year, first_month, 1),
            date(day.year, last_month, monthrange(day.year, last_month)[1]),
        )
