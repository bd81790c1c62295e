import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Numeric, String, Text
from sqlalchemy.sql import func
from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Rental(Base):
    __tablename__ = "rentals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Supabase auth user id of the landlord; stamped server-side, never from input
    owner_id = Column(String, nullable=False, index=True)

    shop_name = Column(String, nullable=False)
    tenant_name = Column(String, nullable=False)
    state = Column(String, nullable=False, index=True)

    city = Column(String, nullable=True)
    address = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    rent_amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=True)  # next date rent is owed

    # monthly / quarterly / yearly / custom
    frequency = Column(String, nullable=False, default="yearly", server_default="yearly")
    # active / terminated
    status = Column(String, nullable=False, default="active", server_default="active")

    # Python-side defaults keep microsecond precision for newest-first ordering
    created_at = Column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("rent_amount >= 0", name="ck_rentals_rent_amount_non_negative"),
        CheckConstraint(
            "frequency in ('monthly', 'quarterly', 'yearly', 'custom')",
            name="ck_rentals_frequency",
        ),
        CheckConstraint("status in ('active', 'terminated')", name="ck_rentals_status"),
        Index("ix_rentals_owner_id_created_at", "owner_id", "created_at"),
    )
