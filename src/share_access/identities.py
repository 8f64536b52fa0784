"""Identity suggestions for interactive front ends.

Offers a fixed list of well-known groups followed by per-year student
groups (``"2026 Students"``, ``"2025 Students"``, ...).  The list is only
a typing aid; any identity name is accepted by the rule manager.
"""
from __future__ import annotations

from datetime import date
from typing import Sequence

DEFAULT_GROUPS: tuple[str, ...] = (
    "AllStudents",
    "AllStaff",
    "Teachers",
    "Administrators",
)

DEFAULT_YEARS_BACK = 6


def cohort_group(year: int) -> str:
    """Return the group name for the student cohort of *year*."""
    return f"{year} Students"


def suggest_identities(
    groups: Sequence[str] | None = None,
    today: date | None = None,
    years_back: int = DEFAULT_YEARS_BACK,
) -> list[str]:
    """Return candidate identity names, named groups first.

    Parameters
    ----------
    groups:
        Named groups to list first.  Defaults to :data:`DEFAULT_GROUPS`.
    today:
        Reference date; the current local date when omitted.
    years_back:
        How many years before the current one get a cohort group.  The
        current year is always included, newest first.

    Example
    -------
    >>> suggest_identities(groups=["AllStudents"], today=date(2025, 9, 1), years_back=2)
    ['AllStudents', '2025 Students', '2024 Students', '2023 Students']
    """
    if years_back < 0:
        raise ValueError(f"years_back must not be negative; got {years_back}.")
    current_year = (today or date.today()).year
    named = list(DEFAULT_GROUPS if groups is None else groups)
    cohorts = [cohort_group(current_year - offset) for offset in range(years_back + 1)]
    return named + cohorts
