from fastapi import APIRouter, Query

import config
from db import get_db
from repositories.accounts_repository import list_active_accounts

router = APIRouter()


@router.get("/accounts")
def get_accounts(group_id: int = Query(config.DEFAULT_GROUP_ID)):
    conn = get_db()
    try:
        accounts = list_active_accounts(conn, group_id)
    finally:
        conn.close()

    total = sum(a.current_balance for a in accounts)
    return {
        "accounts": [a.to_dict() for a in accounts],
        "total_balance": float(total),
    }
