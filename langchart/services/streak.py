from collections.abc import Iterable
from datetime import date
from datetime import timedelta

from langchart.models import ContributionDay

ONE_DAY = timedelta(days=1)


def calculate_streak(*day_ranges: Iterable[ContributionDay]) -> int:
    """Count consecutive active days ending at the most recent calendar day.

    Ranges may overlap; a date that was already counted is ignored. A most
    recent day without contributions yields 0.
    """

    days = [day for day_range in day_ranges for day in day_range]
    days.sort(key=lambda day: (day.date, day.count), reverse=True)

    streak = 0
    last_accepted: date | None = None
    for day in days:
        if last_accepted is None:
            if day.count <= 0:
                return 0
            streak = 1
            last_accepted = day.date
            continue

        if day.date == last_accepted:
            continue
        if day.count <= 0 or last_accepted - day.date != ONE_DAY:
            break

        streak += 1
        last_accepted = day.date

    return streak
