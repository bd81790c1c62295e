import csv
import io
from decimal import Decimal
from typing import Iterable

from app.schemas.rental import RentalOut

CSV_HEADERS = ["Shop Name", "Tenant", "State", "Rent", "Due Date", "Frequency"]

# Leading characters a spreadsheet would evaluate as a formula
FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def _format_rent(amount) -> str:
    if amount is None:
        return ""
    amount = Decimal(amount)
    # 50000.00 -> "50000", 1250.50 -> "1250.50"
    if amount == amount.to_integral_value():
        return str(amount.quantize(Decimal(1)))
    return f"{amount:.2f}"


def _safe_text(value) -> str:
    value = value or ""
    if value.startswith(FORMULA_PREFIXES):
        return "'" + value
    return value


def rental_to_row(rental: RentalOut) -> list:
    return [
        _safe_text(rental.shop_name),
        _safe_text(rental.tenant_name),
        _safe_text(rental.state),
        _format_rent(rental.rent_amount),
        rental.due_date.isoformat() if rental.due_date else "N/A",
        rental.frequency or "",
    ]


def rentals_to_csv(rentals: Iterable[RentalOut]) -> str:
    """Render the (already filtered) rentals as CSV text with a header row."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for rental in rentals:
        writer.writerow(rental_to_row(rental))
    return buf.getvalue()
