from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

import config
from db import get_db
from models.projection_dto import (
    LOW,
    NEGATIVE,
    Alert,
    DayPoint,
    ProjectedTransaction,
    Projection,
)
from models.recurring_dto import (
    Account,
    HypotheticalEntry,
    OneTimeEntry,
    RecurringEntry,
    RecurringRule,
)
from repositories.accounts_repository import list_active_accounts
from repositories.recurring_repository import get_active_recurring_rules
from services.recurring_engine import is_due_in_projection
from utils.dates import weekday_sunday_first
from utils.money import signed_amount

NEGATIVE_MESSAGE = "balance will go negative"
SIMULATION_SUFFIX = " (simulation)"


def _simulated_rule(entry: RecurringEntry) -> RecurringRule:
    """Transient expense rule anchored on the hypothetical's date."""
    return RecurringRule(
        id=None,
        description=entry.description + SIMULATION_SUFFIX,
        amount=entry.amount,
        type="expense",
        frequency=entry.frequency,
        start_date=entry.date,
        day_of_month=entry.date.day,
        day_of_week=weekday_sunday_first(entry.date),
    )


def _low_message(threshold) -> str:
    return f"balance will drop below {threshold}"


def project(
    accounts: List[Account],
    rules: List[RecurringRule],
    today: date,
    hypothetical: Optional[HypotheticalEntry] = None,
    low_balance_threshold=None,
    horizon_days: Optional[int] = None,
) -> Projection:
    """Day-by-day balance simulation over ``today`` .. ``today + horizon_days``.

    Pure function of its inputs. Rules are applied in the order given,
    followed by the hypothetical entry, so each day's transaction list is
    stable. Nothing is persisted and ``last_execution_date`` is never touched.
    """
    if low_balance_threshold is None:
        low_balance_threshold = config.LOW_BALANCE_THRESHOLD
    if horizon_days is None:
        horizon_days = config.PROJECTION_HORIZON_DAYS
    if horizon_days < 0:
        raise ValueError("horizon_days must be zero or positive")
    threshold = Decimal(low_balance_threshold)

    starting_balance = sum(
        (Decimal(a.current_balance) for a in accounts if a.is_active),
        Decimal("0"),
    )
    active_rules = [r for r in rules if r.is_active]

    sim_rule = None
    if isinstance(hypothetical, RecurringEntry):
        sim_rule = _simulated_rule(hypothetical)

    timeline = []
    alerts = []
    running = starting_balance

    for offset in range(horizon_days + 1):
        day = today + timedelta(days=offset)
        day_transactions = []

        for rule in active_rules:
            # biweekly spacing is measured from the stored execution date only
            if not is_due_in_projection(rule, day, rule.last_execution_date):
                continue
            running += signed_amount(rule.type, rule.amount)
            day_transactions.append(ProjectedTransaction(
                description=rule.description,
                amount=rule.amount,
                type=rule.type,
                category_id=rule.category_id,
                is_recurring=True,
            ))

        if isinstance(hypothetical, OneTimeEntry) and day == hypothetical.date:
            running -= hypothetical.amount
            day_transactions.append(ProjectedTransaction(
                description=hypothetical.description + SIMULATION_SUFFIX,
                amount=hypothetical.amount,
                type="expense",
                is_recurring=False,
                is_simulation=True,
            ))
        elif sim_rule is not None and is_due_in_projection(sim_rule, day, None):
            running -= sim_rule.amount
            day_transactions.append(ProjectedTransaction(
                description=sim_rule.description,
                amount=sim_rule.amount,
                type="expense",
                is_recurring=True,
                is_simulation=True,
            ))

        timeline.append(DayPoint(
            date=day,
            balance=running,
            transactions=day_transactions,
            is_negative=running < 0,
        ))

        kinds = {a.kind for a in alerts}
        if running < 0 and NEGATIVE not in kinds:
            alerts.append(Alert(date=day, kind=NEGATIVE, message=NEGATIVE_MESSAGE))
        if 0 <= running < threshold and LOW not in kinds:
            alerts.append(Alert(date=day, kind=LOW, message=_low_message(low_balance_threshold)))

    return Projection(
        start_date=today,
        end_date=today + timedelta(days=horizon_days),
        starting_balance=starting_balance,
        timeline=timeline,
        alerts=alerts,
    )


def load_projection_inputs(group_id: int):
    """Fetch active accounts and rules for a group in one connection."""
    conn = get_db()
    try:
        accounts = list_active_accounts(conn, group_id)
        rules = get_active_recurring_rules(conn, group_id)
    finally:
        conn.close()
    return accounts, rules


def calculate_projection(group_id: int, today: date,
                         hypothetical: Optional[HypotheticalEntry] = None):
    """Read-only 30-day projection for a group, as of ``today``.

    Returns ``(projection, accounts, rules)`` so callers can echo the inputs.
    """
    accounts, rules = load_projection_inputs(group_id)
    projection = project(accounts, rules, today, hypothetical=hypothetical)
    return projection, accounts, rules


def summarize_projection(projection: Projection, recurring_count: int) -> dict:
    """Numbers handed to the insight generator."""
    balances = [p.balance for p in projection.timeline]
    negative = next((a for a in projection.alerts if a.kind == NEGATIVE), None)

    summary = {
        "current_balance": float(projection.starting_balance),
        "projected_balances": {
            "min": float(min(balances)),
            "max": float(max(balances)),
            "final": float(balances[-1]),
        },
        "alerts": [
            {"type": a.kind, "date": a.date.isoformat(), "message": a.message}
            for a in projection.alerts
        ],
        "recurring_count": recurring_count,
        "will_go_negative": negative is not None,
        "days_until_negative": None,
    }
    if negative is not None:
        summary["days_until_negative"] = (negative.date - projection.start_date).days
    return summary


def summarize_simulation(baseline: Projection, with_simulation: Projection,
                         simulation: HypotheticalEntry) -> dict:
    """Impact of a what-if entry: the same horizon projected with and without it."""
    negative = next((a for a in with_simulation.alerts if a.kind == NEGATIVE), None)

    summary = {
        "type": simulation.kind,
        "description": simulation.description,
        "amount": float(simulation.amount),
        "date": simulation.date.isoformat(),
        "frequency": getattr(simulation, "frequency", None),
        "current_balance": float(with_simulation.starting_balance),
        "projected_balance_without": float(baseline.timeline[-1].balance),
        "projected_balance_after": float(with_simulation.timeline[-1].balance),
        "will_go_negative": negative is not None,
        "days_until_negative": None,
    }
    if negative is not None:
        summary["days_until_negative"] = (negative.date - with_simulation.start_date).days
    return summary


def calculate_simulation_impact(group_id: int, today: date, simulation: HypotheticalEntry) -> dict:
    """Project the group's inputs once without and once with ``simulation``."""
    accounts, rules = load_projection_inputs(group_id)
    baseline = project(accounts, rules, today)
    with_simulation = project(accounts, rules, today, hypothetical=simulation)
    return summarize_simulation(baseline, with_simulation, simulation)
