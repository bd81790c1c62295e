from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.errors import ServiceUnavailable
from app.services.rent_advisor import RentAdvisor
from app.services.rental_store import RentalStore, SqlAlchemyRentalStore, SupabaseRentalStore
from app.services.supabase_auth import SupabaseAuthActions


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_supabase_client(request: Request):
    client = request.app.state.supabase
    if client is None:
        raise ServiceUnavailable("Supabase is not configured. Set SUPABASE_URL and SUPABASE_KEY in .env.")
    return client


def get_rental_store(request: Request, db: Session = Depends(get_db)) -> RentalStore:
    if request.app.state.settings.STORE_BACKEND.lower() == "supabase":
        return SupabaseRentalStore(get_supabase_client(request))
    return SqlAlchemyRentalStore(db)


def get_rent_advisor(request: Request) -> RentAdvisor:
    return request.app.state.rent_advisor


def get_auth_actions(request: Request) -> SupabaseAuthActions:
    actions = request.app.state.auth_actions
    if actions is None:
        raise ServiceUnavailable("Supabase is not configured. Set SUPABASE_URL and SUPABASE_KEY in .env.")
    return actions
