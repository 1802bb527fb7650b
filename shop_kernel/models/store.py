"""
Record store models (``shop_kernel.models.store``).

Responsibility:
    SQLAlchemy mappings of the five tables the shop's data-access layer
    reads: employees, services, time_entries, fixed_expenses, settings.
    Column names follow the store (snake_case) so rows can be handed to the
    ingestion layer as plain dicts.

Architecture position:
    Kernel > Models.  Imported by selectors only; the engines never see ORM
    objects, they see ``shop_kernel.domain.records`` values.

Invariants enforced:
    - The kernel never writes to these tables; creation, update and deletion
      belong to the store's owner.
    - ``settings`` is a single-row table (id = 1).
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from shop_kernel.db.base import Base


class EmployeeModel(Base):
    """Employee row: salary and contracted monthly hours."""

    __tablename__ = "employees"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    role: Mapped[str | None] = mapped_column(String(100), nullable=True)
    monthly_salary: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    monthly_hours: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)


class ServiceModel(Base):
    """Service (repair job) row."""

    __tablename__ = "services"
    __table_args__ = (
        Index("idx_services_date", "service_date"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    service_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    plate: Mapped[str | None] = mapped_column(String(20), nullable=True)
    service_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    service_date: Mapped[date | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)


class TimeEntryModel(Base):
    """Hours booked by one employee against one service."""

    __tablename__ = "time_entries"
    __table_args__ = (
        Index("idx_time_entries_service", "service_id"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # No FK to employees: deleted employees leave dangling entries the
    # engines must tolerate.
    service_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("services.id", ondelete="CASCADE"), nullable=False,
    )
    employee_id: Mapped[str] = mapped_column(String(64), nullable=False)
    hours: Mapped[Decimal] = mapped_column(nullable=False)
    entry_date: Mapped[date | None] = mapped_column(nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)


class FixedExpenseModel(Base):
    """Recurring monthly expense row."""

    __tablename__ = "fixed_expenses"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    amount_monthly: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)


class SettingsModel(Base):
    """Single-row shop settings (billing rate)."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    hourly_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
