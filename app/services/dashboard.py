"""
Filtering, sorting and headline counts for the rentals dashboard.

These operate on rentals already loaded through the store for the current
owner; none of them touch the database.
"""
from datetime import date, timedelta
from typing import Iterable, List, Optional

from app.core.regions import canonical_state
from app.schemas.rental import RentalOut

UPCOMING_DUE_WINDOW_DAYS = 30


def _today() -> date:
    return date.today()


def is_upcoming_due(due_date: Optional[date], today: Optional[date] = None) -> bool:
    """Due after today and no later than 30 days from now."""
    if due_date is None:
        return False
    today = today or _today()
    return today < due_date <= today + timedelta(days=UPCOMING_DUE_WINDOW_DAYS)


def filter_rentals(
    rentals: Iterable[RentalOut],
    search: Optional[str] = None,
    state: Optional[str] = None,
    quick: str = "all",
    today: Optional[date] = None,
) -> List[RentalOut]:
    # search: shop or tenant name, case-insensitive
    needle = (search or "").strip().lower()
    # same normalisation as create, so "lagos" matches a stored "Lagos"
    wanted = None
    if state and state.strip().lower() != "all":
        wanted = canonical_state(state) or state.strip()
    result = []
    for r in rentals:
        if needle and needle not in r.shop_name.lower() and needle not in (r.tenant_name or "").lower():
            continue
        if wanted and r.state != wanted:
            continue
        if quick == "dues" and not is_upcoming_due(r.due_date, today):
            continue
        result.append(r)
    return result


def sort_by_due_date(rentals: Iterable[RentalOut]) -> List[RentalOut]:
    """Soonest due first; rentals without a due date go last."""
    return sorted(rentals, key=lambda r: (r.due_date is None, r.due_date or date.max))


def dashboard_stats(rentals: Iterable[RentalOut], today: Optional[date] = None) -> dict:
    rentals = list(rentals)
    return {
        "total_rentals": len(rentals),
        "upcoming_dues": sum(1 for r in rentals if is_upcoming_due(r.due_date, today)),
    }
