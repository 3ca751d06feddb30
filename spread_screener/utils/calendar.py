"""Business-day arithmetic for option expirations."""

from datetime import date, timedelta

import numpy as np


def business_days_between(start: date, end: date) -> int:
    """Count weekdays after ``start`` up to and including ``end``.

    Holidays are not modelled; only Saturdays and Sundays are skipped.

    Args:
        start: Reference date (excluded from the count)
        end: Expiration date (included in the count)

    Returns:
        Number of business days, or 0 when end is not after start

    Example:
        >>> business_days_between(date(2024, 8, 9), date(2024, 8, 16))  # Fri -> Fri
        5
    """
    if end <= start:
        return 0
    one_day = timedelta(days=1)
    return int(np.busday_count(start + one_day, end + one_day))
