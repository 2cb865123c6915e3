"""Employee model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from worklog_payroll.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee record with two independent hourly rates."""

    __tablename__ = "employee"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False, default="")
    pay_rate1: Mapped[Decimal] = mapped_column(
        Numeric(12, 4), nullable=False, default=Decimal("0")
    )
    pay_rate2: Mapped[Decimal] = mapped_column(
        Numeric(12, 4), nullable=False, default=Decimal("0")
    )
    # NULL means the employee has never been paid
    last_payroll_date: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        CheckConstraint("pay_rate1 >= 0", name="employee_pay_rate1_check"),
        CheckConstraint("pay_rate2 >= 0", name="employee_pay_rate2_check"),
    )
