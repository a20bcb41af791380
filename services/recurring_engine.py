"""
Recurring Engine — Deterministic Due-Date Evaluation

Pure functions deciding whether a recurring rule fires on a calendar date.
No database access; no side effects.
"""
from dataclasses import replace
from datetime import date

from models.recurring_dto import RecurringRule
from utils.dates import days_between, last_day_of_month, weekday_sunday_first

BIWEEKLY_SPACING_DAYS = 14


def normalize_rule(rule: RecurringRule) -> RecurringRule:
    """Return a copy of ``rule`` with a usable anchor for its frequency.

    A monthly rule without ``day_of_month`` falls back to day 1 so that
    evaluation stays total. The input rule is left untouched.
    """
    if rule.frequency == "monthly" and not rule.day_of_month:
        return replace(rule, day_of_month=1)
    return rule


def monthly_target_day(day_of_month: int | None, day: date) -> int:
    """Anchor day clamped to the length of ``day``'s month (31 -> Feb 28/29)."""
    return min(day_of_month or 1, last_day_of_month(day.year, day.month))


def frequency_matches(rule: RecurringRule, day: date, last: date | None) -> bool:
    """
    Per-frequency check shared by the sweep and the projector.

    Args:
        rule: Rule to evaluate.
        day: Calendar date under evaluation.
        last: Date the rule last fired, used for biweekly spacing.

    Returns:
        True if the frequency/anchor combination lands on ``day``.
    """
    frequency = rule.frequency

    if frequency == "daily":
        return True

    if frequency == "weekly":
        return weekday_sunday_first(day) == rule.day_of_week

    if frequency == "biweekly":
        if weekday_sunday_first(day) != rule.day_of_week:
            return False
        if last is None:
            return True
        return days_between(last, day) >= BIWEEKLY_SPACING_DAYS

    if frequency == "monthly":
        return day.day == monthly_target_day(rule.day_of_month, day)

    if frequency == "yearly":
        return day.month == rule.start_date.month and day.day == rule.start_date.day

    return False


def is_due_on(rule: RecurringRule, day: date) -> bool:
    """
    Decide whether ``rule`` must materialize a transaction on ``day``.

    Guards: never before ``start_date``, and never twice on the same day
    (``last_execution_date == day``).

    Pure function: same inputs → same output, no side effects.
    """
    if rule.start_date > day:
        return False

    if rule.last_execution_date == day:
        return False

    return frequency_matches(normalize_rule(rule), day, rule.last_execution_date)


def is_due_in_projection(rule: RecurringRule, day: date, last_execution: date | None) -> bool:
    """
    Simulation variant of :func:`is_due_on` for future dates.

    Skips the same-day idempotency guard and never writes anything back.
    Biweekly spacing is measured from ``last_execution`` (the stored
    execution date, or None for immediately eligible); it is not advanced
    by simulated firings. Yearly rules are excluded from the horizon.
    """
    if rule.frequency == "yearly":
        return False

    if rule.start_date > day:
        return False

    return frequency_matches(normalize_rule(rule), day, last_execution)
