from __future__ import annotations

from decimal import Decimal, InvalidOperation

# mutez per tez
MUTEZ = 1_000_000


def cleanse_host(host: str) -> str:
    if not host:
        raise ValueError("Host must not be empty")
    if host.endswith("/"):
        host = host[:-1]
    if not host.startswith("http://") and not host.startswith("https://"):
        host = f"http://{host}"  # default to http
    return host


def mutez_to_tez(amount: int) -> Decimal:
    return Decimal(amount) / MUTEZ


def tez_to_mutez(amount: Decimal | int | str) -> int:
    try:
        value = Decimal(str(amount)) * MUTEZ
    except InvalidOperation as exc:
        raise ValueError(f"Invalid tez amount: {amount!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid tez amount: {amount!r}")
    if value != value.to_integral_value():
        raise ValueError(f"Tez amount has sub-mutez precision: {amount!r}")
    return int(value)
