"""Work log and payroll record models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from worklog_payroll.models.base import Base, TimestampMixin


class WorkLog(Base, TimestampMixin):
    """Hours worked on one day, split across two rate tiers.

    employee_id is a plain reference: rows may outlive their employee.
    """

    __tablename__ = "work_log"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    hours_payrate1: Mapped[Decimal | None] = mapped_column(
        Numeric(8, 2), nullable=True, default=Decimal("0")
    )
    hours_payrate2: Mapped[Decimal | None] = mapped_column(
        Numeric(8, 2), nullable=True, default=Decimal("0")
    )
    deduction: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True, default=Decimal("0")
    )

    __table_args__ = (
        Index("work_log_employee_date_idx", "employee_id", "date"),
        CheckConstraint("hours_payrate1 >= 0", name="work_log_hours1_check"),
        CheckConstraint("hours_payrate2 >= 0", name="work_log_hours2_check"),
        CheckConstraint("deduction >= 0", name="work_log_deduction_check"),
    )


class Payroll(Base, TimestampMixin):
    """Finalized pay run for one employee. Immutable once written."""

    __tablename__ = "payroll"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    employee_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    total_hours: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    # Hours carry 2 places and rates 4, so gross and net need 6 to round-trip
    total_pay: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)
    deductions: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    # Not clamped: deductions may exceed gross
    net_pay: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)
    pay_date: Mapped[datetime] = mapped_column(nullable=False)
    # Exclusive lower bound of the window this run closed
    period_start: Mapped[datetime | None] = mapped_column(nullable=True)
    idempotency_key: Mapped[str | None] = mapped_column(String, nullable=True)

    # Keys are scoped to the employee they were issued for
    __table_args__ = (
        UniqueConstraint(
            "employee_id", "idempotency_key", name="payroll_employee_idempotency_key"
        ),
    )
