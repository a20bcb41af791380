import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

import config
from models.recurring_dto import FREQUENCIES, OneTimeEntry, RecurringEntry
from services.forecast_dto import ProjectionResponseDTO
from services.projection_service import calculate_projection
from utils.dates import normalize_date, resolve_as_of
from utils.money import parse_positive_money

router = APIRouter()


def build_simulation(sim_type, description, amount, sim_date, frequency):
    """Hypothetical entry from query params, or None if any core field is missing."""
    if not (sim_type and description and amount and sim_date):
        return None

    parsed_amount = parse_positive_money(amount)
    parsed_date = normalize_date(sim_date)

    if sim_type == "one-time":
        return OneTimeEntry(description=description, amount=parsed_amount, date=parsed_date)
    if sim_type == "recurring":
        frequency = frequency or "monthly"
        if frequency not in FREQUENCIES:
            raise ValueError("Invalid simulation frequency")
        return RecurringEntry(
            description=description,
            amount=parsed_amount,
            date=parsed_date,
            frequency=frequency,
        )
    raise ValueError("Simulation type must be one-time or recurring")


def _simulation_dict(simulation):
    if simulation is None:
        return None
    payload = {
        "type": simulation.kind,
        "description": simulation.description,
        "amount": float(simulation.amount),
        "date": simulation.date.isoformat(),
    }
    if isinstance(simulation, RecurringEntry):
        payload["frequency"] = simulation.frequency
    return payload


@router.get("/future/projections")
def get_future_projections(
    group_id: int = Query(config.DEFAULT_GROUP_ID),
    as_of_date: Optional[str] = Query(None),
    simulation_type: Optional[str] = Query(None),
    simulation_description: Optional[str] = Query(None),
    simulation_amount: Optional[str] = Query(None),
    simulation_date: Optional[str] = Query(None),
    simulation_frequency: Optional[str] = Query(None),
):
    """
    Return a 30-day projection of the group's combined balance.

    Query Parameters:
        as_of_date (optional): Reference date in ISO format (YYYY-MM-DD).
                              Defaults to today in the reference timezone.
        simulation_* (optional): A what-if expense; applied only when type,
                              description, amount and date are all given.

    Read-only: nothing is persisted.
    """
    try:
        today = resolve_as_of(as_of_date)
        simulation = build_simulation(
            simulation_type, simulation_description, simulation_amount,
            simulation_date, simulation_frequency,
        )
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=400)

    try:
        projection, accounts, _ = calculate_projection(group_id, today, simulation)
    except Exception:
        logging.exception("Projection failed")
        return JSONResponse({"error": "Couldn't compute projection"}, status_code=500)

    dto = ProjectionResponseDTO.from_projection(projection)

    return {
        "start_date": dto.start_date,
        "end_date": dto.end_date,
        "current_balance": dto.current_balance,
        "projections": [
            {
                "date": day.date,
                "balance": day.balance,
                "transactions": [asdict(tx) for tx in day.transactions],
                "is_negative": day.is_negative,
            }
            for day in dto.projections
        ],
        "alerts": [asdict(a) for a in dto.alerts],
        "accounts": [a.to_dict() for a in accounts],
        "has_simulation": simulation is not None,
        "simulation": _simulation_dict(simulation),
    }
