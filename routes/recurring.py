import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel

import config
from services.recurring_rules_service import (
    RecordNotFound,
    create_rule,
    deactivate_rule,
    list_rules,
    update_rule,
)
from services.recurring_service import process_due_recurring
from utils.dates import resolve_as_of

router = APIRouter()


class RecurringCreate(BaseModel):
    description: str
    amount: float
    type: str
    frequency: str
    start_date: date
    account_id: int
    day_of_month: Optional[int] = None
    day_of_week: Optional[int] = None
    category_id: Optional[int] = None


class RecurringUpdate(BaseModel):
    description: Optional[str] = None
    amount: Optional[float] = None
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    is_active: Optional[bool] = None


def _error(message, status_code):
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


# -------------------------
# MATERIALIZATION SWEEP
# -------------------------

@router.post("/recurring/process")
def process_recurring(
    group_id: int = Query(config.DEFAULT_GROUP_ID),
    as_of_date: Optional[str] = Query(None),
):
    """
    Create today's transactions for every due recurring rule.

    Called on login/app-open. Safe to call repeatedly on the same day.
    """
    try:
        today = resolve_as_of(as_of_date)
    except ValueError:
        return _error("Invalid date format. Use YYYY-MM-DD.", 400)

    try:
        return process_due_recurring(group_id, today)
    except Exception as e:
        logging.exception("Recurring sweep failed")
        return _error(str(e), 500)


# -------------------------
# RULE MANAGEMENT
# -------------------------

@router.get("/recurring")
def get_recurring(group_id: int = Query(config.DEFAULT_GROUP_ID)):
    return {"recurring": [r.to_dict() for r in list_rules(group_id)]}


@router.post("/recurring")
def add_recurring(rule: RecurringCreate, group_id: int = Query(config.DEFAULT_GROUP_ID)):
    try:
        created = create_rule(
            group_id=group_id,
            description=rule.description,
            amount=rule.amount,
            type_=rule.type,
            frequency=rule.frequency,
            start_date=rule.start_date,
            account_id=rule.account_id,
            day_of_month=rule.day_of_month,
            day_of_week=rule.day_of_week,
            category_id=rule.category_id,
        )
    except RecordNotFound as e:
        return _error(str(e), 404)
    except ValueError as e:
        return _error(str(e), 400)

    return {"success": True, "recurring": created.to_dict()}


@router.put("/recurring/{rule_id}")
def edit_recurring(rule_id: int, changes: RecurringUpdate,
                   group_id: int = Query(config.DEFAULT_GROUP_ID)):
    try:
        updated = update_rule(rule_id, group_id, changes.model_dump(exclude_unset=True))
    except RecordNotFound as e:
        return _error(str(e), 404)
    except ValueError as e:
        return _error(str(e), 400)

    return {"success": True, "recurring": updated.to_dict()}


@router.delete("/recurring/{rule_id}")
def delete_recurring(rule_id: int, group_id: int = Query(config.DEFAULT_GROUP_ID)):
    """Soft delete: the rule is deactivated, never removed."""
    try:
        deactivate_rule(rule_id, group_id)
    except RecordNotFound as e:
        return _error(str(e), 404)

    return {"success": True, "message": "Recurring rule deactivated"}
