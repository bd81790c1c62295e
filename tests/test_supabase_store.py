from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from postgrest.exceptions import APIError

from app.core.errors import AuthError, NotFoundError, StoreError, ValidationError
from app.services.rental_store import SupabaseRentalStore

ROW = {
    "id": "0b9f5a52-7f4e-4a39-9d0e-3c1f4d7e2a11",
    "owner_id": "u1",
    "shop_name": "Daily Grind",
    "tenant_name": "Jane Doe",
    "state": "Lagos",
    "city": None,
    "address": None,
    "notes": None,
    "rent_amount": 50000,
    "due_date": "2025-01-15",
    "frequency": "yearly",
    "status": "active",
    "created_at": "2025-01-01T10:00:00+00:00",
    "updated_at": "2025-01-01T10:00:00+00:00",
}


def make_client(data):
    """A supabase client whose every query chain ends in execute() -> data."""
    client = MagicMock()
    query = MagicMock()
    for method in ("select", "insert", "update", "delete", "eq", "order", "limit"):
        getattr(query, method).return_value = query
    query.execute.return_value = SimpleNamespace(data=data)
    client.table.return_value = query
    return client, query


def test_list_filters_by_owner_newest_first():
    client, query = make_client([ROW])

    rentals = SupabaseRentalStore(client).list("u1")

    assert [r.id for r in rentals] == [ROW["id"]]
    client.table.assert_called_with("rentals")
    query.eq.assert_called_with("owner_id", "u1")
    query.order.assert_called_with("created_at", desc=True)


def test_list_without_owner_skips_the_query():
    client, _ = make_client([ROW])

    assert SupabaseRentalStore(client).list(None) == []
    client.table.assert_not_called()


def test_create_stamps_owner_and_sends_json_safe_row():
    client, query = make_client([ROW])

    created = SupabaseRentalStore(client).create("u1", {
        "shop_name": "Daily Grind",
        "tenant_name": "Jane Doe",
        "state": "Lagos",
        "rent_amount": "50000",
        "due_date": "2025-01-15",
        "owner_id": "attacker",
    })

    [row] = query.insert.call_args.args
    assert row["owner_id"] == "u1"
    assert row["rent_amount"] == 50000.0
    assert row["due_date"] == "2025-01-15"
    assert row["id"]
    assert created.owner_id == "u1"


def test_create_validates_before_calling_out():
    client, query = make_client([ROW])

    with pytest.raises(ValidationError):
        SupabaseRentalStore(client).create("u1", {"shop_name": "Daily Grind", "rent_amount": -1})
    query.insert.assert_not_called()

    with pytest.raises(AuthError):
        SupabaseRentalStore(client).create(None, ROW)


def test_update_scoped_to_owner():
    client, query = make_client([{**ROW, "rent_amount": 75000}])

    updated = SupabaseRentalStore(client).update("u1", ROW["id"], {"rent_amount": 75000})

    assert updated.rent_amount == 75000
    [changes] = query.update.call_args.args
    assert changes["rent_amount"] == 75000.0
    assert "updated_at" in changes
    query.eq.assert_any_call("id", ROW["id"])
    query.eq.assert_any_call("owner_id", "u1")


def test_update_or_delete_matching_nothing_is_not_found():
    client, _ = make_client([])
    store = SupabaseRentalStore(client)

    with pytest.raises(NotFoundError):
        store.update("u2", ROW["id"], {"rent_amount": 1})
    with pytest.raises(NotFoundError):
        store.delete("u2", ROW["id"])
    with pytest.raises(NotFoundError):
        store.get("u2", ROW["id"])


def test_api_error_becomes_store_error():
    client, query = make_client([])
    query.execute.side_effect = APIError({"message": "permission denied for table rentals", "code": "42501"})

    with pytest.raises(StoreError) as exc_info:
        SupabaseRentalStore(client).list("u1")

    assert "permission denied" in exc_info.value.message


def test_create_without_returned_row_is_store_error():
    client, _ = make_client([])

    with pytest.raises(StoreError):
        SupabaseRentalStore(client).create("u1", {
            "shop_name": "Daily Grind",
            "tenant_name": "Jane Doe",
            "state": "Lagos",
            "rent_amount": 50000,
        })


def test_rent_is_checked_before_calling_out():
    client, query = make_client([ROW])

    with pytest.raises(ValidationError):
        SupabaseRentalStore(client).update("u1", ROW["id"], {"rent_amount": "12.345"})
    query.update.assert_not_called()
