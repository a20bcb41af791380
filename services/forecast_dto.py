from dataclasses import dataclass
from typing import List, Optional


@dataclass
class ProjectedTransactionDTO:
    description: str
    amount: float
    type: str
    category_id: Optional[int]
    is_recurring: bool
    is_simulation: bool


@dataclass
class ProjectionDayDTO:
    """Single day in the projection timeline."""
    date: str  # ISO format YYYY-MM-DD
    balance: float
    transactions: List[ProjectedTransactionDTO]
    is_negative: bool


@dataclass
class AlertDTO:
    date: str  # ISO format
    type: str
    message: str


@dataclass
class ProjectionResponseDTO:
    """Complete 30-day projection response."""
    start_date: str  # ISO format
    end_date: str  # ISO format
    current_balance: float
    projections: List[ProjectionDayDTO]
    alerts: List[AlertDTO]

    @classmethod
    def from_projection(cls, projection):
        """Convert Projection to JSON-serializable DTO."""
        return cls(
            start_date=projection.start_date.isoformat(),
            end_date=projection.end_date.isoformat(),
            current_balance=float(projection.starting_balance),
            projections=[
                ProjectionDayDTO(
                    date=day.date.isoformat(),
                    balance=float(day.balance),
                    transactions=[
                        ProjectedTransactionDTO(
                            description=tx.description,
                            amount=float(tx.amount),
                            type=tx.type,
                            category_id=tx.category_id,
                            is_recurring=tx.is_recurring,
                            is_simulation=tx.is_simulation,
                        )
                        for tx in day.transactions
                    ],
                    is_negative=day.is_negative,
                )
                for day in projection.timeline
            ],
            alerts=[
                AlertDTO(date=a.date.isoformat(), type=a.kind, message=a.message)
                for a in projection.alerts
            ],
        )
