import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

import config
from routes.forecast import build_simulation
from services.insight_service import (
    InsightUnavailable,
    request_future_insight,
    request_simulation_insight,
)
from services.projection_service import (
    calculate_projection,
    calculate_simulation_impact,
    summarize_projection,
)
from utils.dates import resolve_as_of

router = APIRouter()


def _error(message, status_code, **extra):
    return JSONResponse({"success": False, "error": message, **extra}, status_code=status_code)


@router.post("/ai/future-insights")
def future_insights(
    group_id: int = Query(config.DEFAULT_GROUP_ID),
    as_of_date: Optional[str] = Query(None),
):
    """Summarize the 30-day projection and ask the LLM to describe it."""
    try:
        today = resolve_as_of(as_of_date)
    except ValueError:
        return _error("Invalid date format. Use YYYY-MM-DD.", 400)

    try:
        projection, _, rules = calculate_projection(group_id, today)
    except Exception:
        logging.exception("Projection failed")
        return _error("Couldn't compute projection", 500)

    summary = summarize_projection(projection, recurring_count=len(rules))

    try:
        insights = request_future_insight(summary)
    except InsightUnavailable as e:
        return _error(str(e), 503, summary=summary)

    return {"success": True, "summary": summary, "insights": insights}


@router.post("/ai/simulation-insights")
def simulation_insights(
    group_id: int = Query(config.DEFAULT_GROUP_ID),
    as_of_date: Optional[str] = Query(None),
    simulation_type: Optional[str] = Query(None),
    simulation_description: Optional[str] = Query(None),
    simulation_amount: Optional[str] = Query(None),
    simulation_date: Optional[str] = Query(None),
    simulation_frequency: Optional[str] = Query(None),
):
    """
    Ask the LLM whether a what-if expense fits the group's budget.

    Takes the same simulation_* parameters as GET /future/projections; all of
    type, description, amount and date are required here.
    """
    try:
        today = resolve_as_of(as_of_date)
        simulation = build_simulation(
            simulation_type, simulation_description, simulation_amount,
            simulation_date, simulation_frequency,
        )
    except ValueError as e:
        return _error(str(e), 400)

    if simulation is None:
        return _error("Incomplete simulation data", 400)

    try:
        impact = calculate_simulation_impact(group_id, today, simulation)
    except Exception:
        logging.exception("Simulation projection failed")
        return _error("Couldn't compute projection", 500)

    try:
        insights = request_simulation_insight(impact)
    except InsightUnavailable as e:
        return _error(str(e), 503, impact=impact)

    return {"success": True, "impact": impact, "insights": insights}
