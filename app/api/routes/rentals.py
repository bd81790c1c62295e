from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from app.api.deps import get_rental_store
from app.core.auth import User, get_current_user
from app.core.regions import NIGERIAN_STATES
from app.schemas.rental import RentalCreate, RentalOut, RentalStatsOut, RentalUpdate, StatesOut
from app.services.dashboard import dashboard_stats, filter_rentals, sort_by_due_date
from app.services.export import rentals_to_csv
from app.services.rental_store import RentalStore

router = APIRouter(prefix="/rentals", tags=["rentals"])


def _filtered_rentals(
    store: RentalStore,
    current_user: User,
    search: Optional[str],
    state: Optional[str],
    quick: str,
    sort: str,
) -> List[RentalOut]:
    rentals = filter_rentals(store.list(current_user.id), search=search, state=state, quick=quick)
    if sort == "due":
        rentals = sort_by_due_date(rentals)
    return rentals


@router.get("", response_model=List[RentalOut])
def list_rentals(
    store: RentalStore = Depends(get_rental_store),
    current_user: User = Depends(get_current_user),
    search: Optional[str] = Query(None, description="search by shop or tenant name"),
    state: Optional[str] = Query(None, description="state name (any case), or 'all'"),
    quick: str = Query("all", pattern="^(all|dues)$", description="'dues' = due in the next 30 days"),
    sort: str = Query("created", pattern="^(created|due)$", description="created (newest first) | due (soonest first)"),
):
    """
    The caller's rentals. Newest first by default; `sort=due` orders by due
    date with undated rentals last.
    """
    return _filtered_rentals(store, current_user, search, state, quick, sort)


@router.get("/stats", response_model=RentalStatsOut)
def rentals_stats(
    store: RentalStore = Depends(get_rental_store),
    current_user: User = Depends(get_current_user),
):
    """Top cards: total rentals and rentals due within 30 days."""
    return dashboard_stats(store.list(current_user.id))


@router.get("/states", response_model=StatesOut)
def list_states():
    return {"states": NIGERIAN_STATES}


@router.get("/export.csv")
def export_rentals_csv(
    store: RentalStore = Depends(get_rental_store),
    current_user: User = Depends(get_current_user),
    search: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    quick: str = Query("all", pattern="^(all|dues)$"),
    sort: str = Query("created", pattern="^(created|due)$"),
):
    """Download the currently filtered rentals as rentals.csv."""
    rentals = _filtered_rentals(store, current_user, search, state, quick, sort)
    return StreamingResponse(
        iter([rentals_to_csv(rentals)]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=rentals.csv"},
    )


@router.get("/{rental_id}", response_model=RentalOut)
def get_rental(
    rental_id: str,
    store: RentalStore = Depends(get_rental_store),
    current_user: User = Depends(get_current_user),
):
    return store.get(current_user.id, rental_id)


@router.post("", response_model=RentalOut, status_code=201)
def create_rental(
    payload: RentalCreate,
    store: RentalStore = Depends(get_rental_store),
    current_user: User = Depends(get_current_user),
):
    """
    Create a rental owned by the caller. Any owner field in the body is ignored.

    **Example:**
    ```
    POST /rentals
    {
        "shop_name": "Daily Grind",
        "tenant_name": "Jane Doe",
        "state": "Lagos",
        "rent_amount": 50000,
        "due_date": "2025-01-15"
    }
    ```
    """
    return store.create(current_user.id, payload)


@router.patch("/{rental_id}", response_model=RentalOut)
def update_rental(
    rental_id: str,
    payload: RentalUpdate,
    store: RentalStore = Depends(get_rental_store),
    current_user: User = Depends(get_current_user),
):
    return store.update(current_user.id, rental_id, payload)


@router.delete("/{rental_id}", status_code=204)
def delete_rental(
    rental_id: str,
    store: RentalStore = Depends(get_rental_store),
    current_user: User = Depends(get_current_user),
):
    store.delete(current_user.id, rental_id)
    return None
