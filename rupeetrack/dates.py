"""Date utilities for rupeetrack.

Pure functions for month labels and date formatting.
"""

from datetime import date

# Fixed English abbreviations so labels do not depend on the process locale
SHORT_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_label(day: date, year_aware: bool = False) -> str:
    """Short month label for a date.

    Args:
        day: Date to label.
        year_aware: If True, append the year so the same month in
            different years gets a different label.

    Returns:
        Label such as "Jan", or "Jan 2024" when year_aware is set.
    """
    label = SHORT_MONTHS[day.month - 1]
    if year_aware:
        return f"{label} {day.year}"
    return label


def format_display_date(day: date) -> str:
    """Format a date for tables, e.g. "05 Jan 2024"."""
    return f"{day.day:02d} {SHORT_MONTHS[day.month - 1]} {day.year}"
