from datetime import date, datetime
from decimal import Decimal

from app.schemas.rental import RentalOut
from app.services.dashboard import dashboard_stats, filter_rentals, is_upcoming_due, sort_by_due_date
from app.services.export import rentals_to_csv

TODAY = date(2025, 1, 1)


def make_rental(shop_name, tenant_name="Jane Doe", state="Lagos", due_date=None, rent_amount="50000", **extra):
    return RentalOut(
        id=shop_name.lower().replace(" ", "-"),
        owner_id="u1",
        shop_name=shop_name,
        tenant_name=tenant_name,
        state=state,
        rent_amount=Decimal(rent_amount),
        due_date=due_date,
        frequency=extra.get("frequency", "yearly"),
        status="active",
        created_at=datetime(2024, 12, 1),
        updated_at=datetime(2024, 12, 1),
    )


def test_upcoming_due_window():
    assert not is_upcoming_due(None, TODAY)
    assert not is_upcoming_due(TODAY, TODAY)
    assert is_upcoming_due(date(2025, 1, 2), TODAY)
    assert is_upcoming_due(date(2025, 1, 31), TODAY)
    assert not is_upcoming_due(date(2025, 2, 1), TODAY)
    assert not is_upcoming_due(date(2024, 12, 31), TODAY)


def test_filter_combines_search_state_and_dues():
    rentals = [
        make_rental("Daily Grind", due_date=date(2025, 1, 10)),
        make_rental("Grind House", state="Kano", due_date=date(2025, 1, 10)),
        make_rental("Mama Put", tenant_name="Grinder Okafor", due_date=date(2025, 6, 1)),
    ]

    assert [r.shop_name for r in filter_rentals(rentals, search="GRIND", today=TODAY)] == [
        "Daily Grind",
        "Grind House",
        "Mama Put",
    ]
    assert [r.shop_name for r in filter_rentals(rentals, search="grind", state="Lagos", today=TODAY)] == [
        "Daily Grind",
        "Mama Put",
    ]
    assert [r.shop_name for r in filter_rentals(rentals, quick="dues", today=TODAY)] == [
        "Daily Grind",
        "Grind House",
    ]


def test_sort_puts_undated_last():
    rentals = [
        make_rental("Undated"),
        make_rental("Later", due_date=date(2025, 3, 1)),
        make_rental("Sooner", due_date=date(2025, 2, 1)),
    ]

    assert [r.shop_name for r in sort_by_due_date(rentals)] == ["Sooner", "Later", "Undated"]


def test_stats():
    rentals = [
        make_rental("Daily Grind", due_date=date(2025, 1, 10)),
        make_rental("Mama Put"),
    ]

    assert dashboard_stats(rentals, today=TODAY) == {"total_rentals": 2, "upcoming_dues": 1}
    assert dashboard_stats([], today=TODAY) == {"total_rentals": 0, "upcoming_dues": 0}


def test_csv_quotes_commas_and_formats_values():
    rentals = [
        make_rental("Grind, Brew & Co", due_date=date(2025, 1, 15), rent_amount="1250.5"),
        make_rental("Mama Put", frequency="monthly"),
    ]

    assert rentals_to_csv(rentals).split("\n") == [
        "Shop Name,Tenant,State,Rent,Due Date,Frequency",
        '"Grind, Brew & Co",Jane Doe,Lagos,1250.50,2025-01-15,yearly',
        "Mama Put,Jane Doe,Lagos,50000,N/A,monthly",
        "",
    ]


def test_csv_of_nothing_is_just_the_header():
    assert rentals_to_csv([]) == "Shop Name,Tenant,State,Rent,Due Date,Frequency\n"


def test_state_filter_ignores_case():
    rentals = [make_rental("Daily Grind"), make_rental("Mama Put", state="Kano")]

    assert [r.shop_name for r in filter_rentals(rentals, state="lagos", today=TODAY)] == ["Daily Grind"]
    assert [r.shop_name for r in filter_rentals(rentals, state=" KANO ", today=TODAY)] == ["Mama Put"]
    assert len(filter_rentals(rentals, state="ALL", today=TODAY)) == 2
    assert filter_rentals(rentals, state="Atlantis", today=TODAY) == []


def test_csv_neutralises_formula_cells():
    rentals = [
        make_rental("=HYPERLINK(\"http://evil\")", tenant_name="@SUM(A1:A9)"),
        make_rental("-Minus Shop", tenant_name="+Plus Tenant"),
    ]

    lines = rentals_to_csv(rentals).split("\n")

    assert lines[1] == '"\'=HYPERLINK(""http://evil"")",\'@SUM(A1:A9),Lagos,50000,N/A,yearly'
    assert lines[2] == "'-Minus Shop,'+Plus Tenant,Lagos,50000,N/A,yearly"
