"""
Pregnancy progress derived from a user's current week.

Assumes a 40-week term. Milestones and guidance mirror what the dashboard
shows next to the policy overview.
"""

from typing import List, Optional, Union

from pydantic import Field

from ..claims.schema import CamelModel

TERM_WEEKS = 40

# (week, title)
MILESTONES = [
    (12, "End of First Trimester"),
    (20, "Anatomy Scan"),
    (28, "Third Trimester Begins"),
    (36, "Full Term Approaching"),
    (40, "Due Date"),
]


class Trimester(CamelModel):
    current: str
    weeks: str
    description: str


class Milestone(CamelModel):
    week: int
    title: str
    passed: bool = Field(description="The user is at or past this week")
    current: bool = Field(description="Within two weeks before or one week after")


class PregnancyProgress(CamelModel):
    """Progress summary for the pregnancy tracker."""

    week: int
    progress_percent: int = Field(ge=0, le=100)
    trimester: Trimester
    milestones: List[Milestone]
    next_step: str


def parse_week(value: Union[str, int, None]) -> Optional[int]:
    """Parse the stored pregnancy week. Returns None for missing or unparseable values."""
    if value is None:
        return None
    try:
        week = int(str(value).strip())
    except ValueError:
        return None
    return week if week >= 0 else None


def trimester_for(week: int) -> Trimester:
    if week <= 12:
        return Trimester(current="First", weeks="1-12 weeks", description="Foundation period")
    if week <= 28:
        return Trimester(current="Second", weeks="13-28 weeks", description="Growth period")
    return Trimester(current="Third", weeks="29-40 weeks", description="Final preparation")


def next_step_for(week: int) -> str:
    if week < 20:
        return "Schedule your anatomy scan around week 20 for detailed baby development check."
    if week < 28:
        return "Begin preparing for third trimester appointments and glucose screening."
    if week < 36:
        return "Start discussing birth plan options and hospital registration."
    return "Prepare your hospital bag and finalize newborn care arrangements."


def pregnancy_progress(week: Union[str, int, None]) -> Optional[PregnancyProgress]:
    """
    Build the progress summary for a pregnancy week.

    Args:
        week: Week as stored on the user (a string) or an int

    Returns:
        PregnancyProgress, or None when the week is missing or invalid
    """
    parsed = parse_week(week)
    if parsed is None:
        return None

    percent = min(round(parsed / TERM_WEEKS * 100), 100)
    milestones = [
        Milestone(
            week=milestone_week,
            title=title,
            passed=parsed >= milestone_week,
            current=milestone_week - 2 <= parsed <= milestone_week + 1,
        )
        for milestone_week, title in MILESTONES
    ]
    return PregnancyProgress(
        week=parsed,
        progress_percent=percent,
        trimester=trimester_for(parsed),
        milestones=milestones,
        next_step=next_step_for(parsed),
    )
