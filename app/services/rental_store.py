"""
Owner-scoped CRUD over the `rentals` table.

Every query filters on owner_id, whatever row-level-security policy the
database may also have. Writes never take the owner from client input: it is
always the id of the authenticated caller passed in by the route.
"""
import logging
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx
from postgrest.exceptions import APIError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import AuthError, NotFoundError, StoreError
from app.models.rental import Rental
from app.schemas.rental import RentalOut
from app.services.validation import validate_new_rental, validate_rental_changes

logger = logging.getLogger(__name__)

RENTALS_TABLE = "rentals"


def _require_owner(owner_id: Optional[str], action: str) -> str:
    if not owner_id:
        raise AuthError(f"User not authenticated to {action} a rental. Please log in again.")
    return owner_id


class RentalStore:
    """Interface shared by the SQLAlchemy and Supabase backends."""

    def list(self, owner_id: Optional[str]) -> List[RentalOut]:
        """Caller's rentals, newest created_at first. Unauthenticated callers get []."""
        raise NotImplementedError

    def get(self, owner_id: str, rental_id: str) -> RentalOut:
        raise NotImplementedError

    def create(self, owner_id: str, fields: Any) -> RentalOut:
        raise NotImplementedError

    def update(self, owner_id: str, rental_id: str, fields: Any) -> RentalOut:
        raise NotImplementedError

    def delete(self, owner_id: str, rental_id: str) -> None:
        raise NotImplementedError


class SqlAlchemyRentalStore(RentalStore):
    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, exc: Exception) -> StoreError:
        self.db.rollback()
        logger.exception("Database error while trying to %s rental", action)
        return StoreError(f"Database error: failed to {action} rental.")

    def _owned(self, owner_id: str, rental_id: str) -> Rental:
        rental = (
            self.db.query(Rental)
            .filter(Rental.id == rental_id, Rental.owner_id == owner_id)
            .first()
        )
        if rental is None:
            raise NotFoundError("Rental not found")
        return rental

    def list(self, owner_id: Optional[str]) -> List[RentalOut]:
        if not owner_id:
            return []
        try:
            rows = (
                self.db.query(Rental)
                .filter(Rental.owner_id == owner_id)
                .order_by(Rental.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._fail("fetch", e) from e
        return [RentalOut.model_validate(r) for r in rows]

    def get(self, owner_id: str, rental_id: str) -> RentalOut:
        _require_owner(owner_id, "view")
        try:
            rental = self._owned(owner_id, rental_id)
        except SQLAlchemyError as e:
            raise self._fail("fetch", e) from e
        return RentalOut.model_validate(rental)

    def create(self, owner_id: str, fields: Any) -> RentalOut:
        _require_owner(owner_id, "add")
        payload = validate_new_rental(fields)

        rental = Rental(**payload.model_dump(), owner_id=owner_id)
        try:
            self.db.add(rental)
            self.db.commit()
            self.db.refresh(rental)
        except SQLAlchemyError as e:
            raise self._fail("create", e) from e

        logger.info("Rental %s created for owner %s", rental.id, owner_id)
        return RentalOut.model_validate(rental)

    def update(self, owner_id: str, rental_id: str, fields: Any) -> RentalOut:
        _require_owner(owner_id, "update")
        data = validate_rental_changes(fields).model_dump(exclude_unset=True)

        try:
            rental = self._owned(owner_id, rental_id)
            for k, v in data.items():
                setattr(rental, k, v)
            self.db.commit()
            self.db.refresh(rental)
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e

        logger.info("Rental %s updated (%s)", rental_id, ", ".join(sorted(data)) or "no changes")
        return RentalOut.model_validate(rental)

    def delete(self, owner_id: str, rental_id: str) -> None:
        _require_owner(owner_id, "delete")
        try:
            rental = self._owned(owner_id, rental_id)
            self.db.delete(rental)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e) from e
        logger.info("Rental %s deleted", rental_id)


def _to_row(data: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-safe row for PostgREST."""
    row = {}
    for k, v in data.items():
        if isinstance(v, Decimal):
            v = float(v)
        elif isinstance(v, (date, datetime)):
            v = v.isoformat()
        row[k] = v
    return row


class SupabaseRentalStore(RentalStore):
    """
    Same contract over the Supabase PostgREST API (supabase-py client).

    update/delete return the affected rows; an empty result means the id did
    not exist or belongs to another owner.
    """

    def __init__(self, client):
        self.client = client

    def _table(self):
        return self.client.table(RENTALS_TABLE)

    def _fail(self, action: str, exc: Exception) -> StoreError:
        logger.exception("Supabase error while trying to %s rental", action)
        message = getattr(exc, "message", None) or str(exc)
        return StoreError(f"Database error: {message}")

    def list(self, owner_id: Optional[str]) -> List[RentalOut]:
        if not owner_id:
            return []
        try:
            response = (
                self._table()
                .select("*")
                .eq("owner_id", owner_id)
                .order("created_at", desc=True)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise self._fail("fetch", e) from e
        return [RentalOut.model_validate(r) for r in response.data or []]

    def get(self, owner_id: str, rental_id: str) -> RentalOut:
        _require_owner(owner_id, "view")
        try:
            response = (
                self._table()
                .select("*")
                .eq("id", rental_id)
                .eq("owner_id", owner_id)
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise self._fail("fetch", e) from e
        if not response.data:
            raise NotFoundError("Rental not found")
        return RentalOut.model_validate(response.data[0])

    def create(self, owner_id: str, fields: Any) -> RentalOut:
        _require_owner(owner_id, "add")
        payload = validate_new_rental(fields)

        row = _to_row(payload.model_dump())
        row["id"] = str(uuid.uuid4())
        row["owner_id"] = owner_id
        try:
            response = self._table().insert(row).execute()
        except (APIError, httpx.HTTPError) as e:
            raise self._fail("create", e) from e
        if not response.data:
            raise StoreError("Failed to create rental: no data returned from database.")

        logger.info("Rental %s created for owner %s", row["id"], owner_id)
        return RentalOut.model_validate(response.data[0])

    def update(self, owner_id: str, rental_id: str, fields: Any) -> RentalOut:
        _require_owner(owner_id, "update")
        data = validate_rental_changes(fields).model_dump(exclude_unset=True)

        row = _to_row(data)
        row["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            response = (
                self._table()
                .update(row)
                .eq("id", rental_id)
                .eq("owner_id", owner_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise self._fail("update", e) from e
        if not response.data:
            raise NotFoundError("Rental not found")

        logger.info("Rental %s updated (%s)", rental_id, ", ".join(sorted(data)) or "no changes")
        return RentalOut.model_validate(response.data[0])

    def delete(self, owner_id: str, rental_id: str) -> None:
        _require_owner(owner_id, "delete")
        try:
            response = (
                self._table()
                .delete()
                .eq("id", rental_id)
                .eq("owner_id", owner_id)
                .execute()
            )
        except (APIError, httpx.HTTPError) as e:
            raise self._fail("delete", e) from e
        if not response.data:
            raise NotFoundError("Rental not found")
        logger.info("Rental %s deleted", rental_id)
