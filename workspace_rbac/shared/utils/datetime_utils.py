# workspace_rbac/shared/utils/datetime_utils.py

"""
Utilities for datetime operations.

All timestamps are stored as naive UTC datetimes. Inputs that carry a
timezone are converted to UTC and stripped before they reach the database
or are compared with stored values.
"""

from datetime import datetime, timezone, timedelta
from typing import Optional


class DateTimeUtil:
    """
    Utility class for datetime operations.

    Provides static methods for common datetime operations like:
    - Getting current UTC time
    - Normalizing datetimes for storage and comparison
    - Adding time periods
    """

    @staticmethod
    def utcnow() -> datetime:
        """
        Get current UTC time.

        Returns:
            datetime: Current UTC time with timezone info
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def utcnow_naive() -> datetime:
        """
        Get current UTC time as naive datetime (without timezone).

        Returns:
            datetime: Current UTC time without timezone info
        """
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def for_storage(dt: Optional[datetime] = None) -> datetime:
        """
        Format a datetime for database storage.

        Args:
            dt: Datetime to normalize. Defaults to now.

        Returns:
            datetime: Naive UTC datetime
        """
        if dt is None:
            return DateTimeUtil.utcnow_naive()
        if dt.tzinfo is not None:
            dt = dt.astimezone(timezone.utc)
        return dt.replace(tzinfo=None)

    @staticmethod
    def add_minutes(dt: datetime, minutes: int) -> datetime:
        return dt + timedelta(minutes=minutes)

    @staticmethod
    def is_past(dt: datetime, now: Optional[datetime] = None) -> bool:
        """
        Check whether a datetime is not after `now` (both normalized to naive UTC).
        """
        now = DateTimeUtil.for_storage(now)
        return DateTimeUtil.for_storage(dt) <= now
