from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize a number (or numeric string) to cents."""
    if value is None:
        raise ValueError("missing money value")

    if isinstance(value, float):
        value = repr(value)

    if isinstance(value, str):
        value = value.strip().replace("R$", "").replace("$", "").replace(",", "")
        if not value:
            raise ValueError("empty money value")

    try:
        return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValueError("invalid money value") from exc


def parse_positive_money(value) -> Decimal:
    amount = to_money(value)
    if amount <= 0:
        raise ValueError("amount must be positive")
    return amount


def signed_amount(type_: str, amount: Decimal) -> Decimal:
    """Income adds to a balance, anything else subtracts."""
    return amount if type_ == "income" else -amount
