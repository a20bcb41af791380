from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional

NEGATIVE = "negative"
LOW = "low"


@dataclass
class ProjectedTransaction:
    description: str
    amount: Decimal
    type: str
    category_id: Optional[int] = None
    is_recurring: bool = True
    is_simulation: bool = False


@dataclass
class DayPoint:
    date: date
    balance: Decimal
    transactions: List[ProjectedTransaction] = field(default_factory=list)
    is_negative: bool = False


@dataclass
class Alert:
    date: date
    kind: str  # NEGATIVE | LOW
    message: str


@dataclass
class Projection:
    start_date: date
    end_date: date
    starting_balance: Decimal
    timeline: List[DayPoint]
    alerts: List[Alert]
