import hashlib
import json
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, List, Optional

CENTS = Decimal("0.01")

# largest value an SQLite INTEGER column can hold
SQLITE_MAX_INT = 2**63 - 1


def to_money(value) -> Decimal:
    """
    Convert a price-like value to a Decimal rounded to cents.

    Floats go through str() first so 0.1 stays 0.10 rather than
    0.1000000000000000055511151231257827.
    """
    if isinstance(value, float):
        value = str(value)
    try:
        return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f"Not a valid amount: {value!r}") from e


def line_total(unit_price: Decimal, qty: int) -> Decimal:
    return to_money(unit_price * qty)


def next_category_code(last_code: Optional[str]) -> str:
    """
    Return the code following last_code: None -> C001, C009 -> C010, C999 -> C1000.
    """
    if not last_code:
        return "C001"
    number = int(last_code[1:])
    return f"C{number + 1:03d}"


def fits_sqlite_int(value: int) -> bool:
    return -SQLITE_MAX_INT - 1 <= value <= SQLITE_MAX_INT


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode()).hexdigest()


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def dump_urls(urls: Iterable[str]) -> str:
    return json.dumps(list(urls))


def load_urls(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return list(json.loads(raw))
