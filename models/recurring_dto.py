from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional, Union

FREQUENCIES = ("daily", "weekly", "biweekly", "monthly", "yearly")
TRANSACTION_TYPES = ("income", "expense")


@dataclass
class RecurringRule:
    id: Optional[int]
    description: str
    amount: Decimal                 # always positive; direction comes from type
    type: str                       # 'income' | 'expense'
    frequency: str                  # one of FREQUENCIES
    start_date: date
    account_id: Optional[int] = None
    day_of_month: Optional[int] = None   # 1-31, monthly only
    day_of_week: Optional[int] = None    # 0=Sunday..6=Saturday, weekly/biweekly only
    last_execution_date: Optional[date] = None
    category_id: Optional[int] = None
    group_id: Optional[int] = None
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict):
        return cls(
            id=row["id"],
            description=row["description"],
            amount=row["amount"],
            type=row["type"],
            frequency=row["frequency"],
            start_date=row["start_date"],
            account_id=row["account_id"],
            day_of_month=row.get("day_of_month"),
            day_of_week=row.get("day_of_week"),
            last_execution_date=row.get("last_execution_date"),
            category_id=row.get("category_id"),
            group_id=row.get("group_id"),
            is_active=row.get("is_active", True),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "amount": float(self.amount),
            "type": self.type,
            "frequency": self.frequency,
            "day_of_month": self.day_of_month,
            "day_of_week": self.day_of_week,
            "start_date": self.start_date.isoformat(),
            "last_execution_date": (
                self.last_execution_date.isoformat() if self.last_execution_date else None
            ),
            "account_id": self.account_id,
            "category_id": self.category_id,
            "is_active": self.is_active,
        }


@dataclass
class Account:
    id: int
    name: str
    current_balance: Decimal
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "current_balance": float(self.current_balance),
            "is_active": self.is_active,
        }


# What-if entries for the projector. Never persisted.

@dataclass(frozen=True)
class OneTimeEntry:
    description: str
    amount: Decimal
    date: date
    kind: str = "one-time"


@dataclass(frozen=True)
class RecurringEntry:
    description: str
    amount: Decimal
    date: date
    frequency: str = "monthly"
    kind: str = "recurring"


HypotheticalEntry = Union[OneTimeEntry, RecurringEntry]
