"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from worklog_payroll.calculators.windows import as_utc

# Amounts travel as JSON numbers; Decimal is kept everywhere else
Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
# Precision matches the storage columns so every store sees the same values
Rate = Annotated[Decimal, Field(ge=0, decimal_places=4)]
Quantity = Annotated[Decimal, Field(ge=0, decimal_places=2)]


def _utc_or_none(value: datetime | None) -> datetime | None:
    return as_utc(value) if value is not None else None


class CamelModel(BaseModel):
    """Response model whose JSON keys are camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    name: str = Field(min_length=1)
    role: str = ""
    pay_rate1: Rate = Decimal("0")
    pay_rate2: Rate = Decimal("0")
    last_payroll_date: datetime | None = None

    @field_validator("last_payroll_date")
    @classmethod
    def _normalize_date(cls, value: datetime | None) -> datetime | None:
        return _utc_or_none(value)


class EmployeeUpdate(BaseModel):
    """Schema for a partial employee edit. Only provided fields change."""

    name: str | None = Field(default=None, min_length=1)
    role: str | None = None
    pay_rate1: Rate | None = None
    pay_rate2: Rate | None = None
    last_payroll_date: datetime | None = None

    @field_validator("name", "role", "pay_rate1", "pay_rate2")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("last_payroll_date")
    @classmethod
    def _normalize_date(cls, value: datetime | None) -> datetime | None:
        return _utc_or_none(value)


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    role: str
    pay_rate1: Amount
    pay_rate2: Amount
    last_payroll_date: datetime | None = None


# ============================================================================
# Work log schemas
# ============================================================================


class WorkLogCreate(BaseModel):
    """Schema for recording one day of work."""

    employee_id: UUID = Field(
        validation_alias=AliasChoices("employeeId", "employee_id"),
    )
    date: datetime
    hours_payrate1: Quantity = Decimal("0")
    hours_payrate2: Quantity = Decimal("0")
    deduction: Quantity = Decimal("0")

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return as_utc(value)


class WorkLogResponse(BaseModel):
    """Schema for work log response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    employee_id: UUID = Field(serialization_alias="employeeId")
    date: datetime
    hours_payrate1: Amount | None = None
    hours_payrate2: Amount | None = None
    deduction: Amount | None = None


# ============================================================================
# Payroll schemas
# ============================================================================


class PreviewResponse(CamelModel):
    """Pay owed since the last payout; nothing is persisted."""

    employee_id: UUID
    total_hours: Amount
    total_pay: Amount
    deductions: Amount
    net_pay: Amount
    last_pay_date: datetime
    preview_date: datetime


class PayrollResponse(CamelModel):
    """A finalized payroll record."""

    id: UUID
    employee_id: UUID
    total_hours: Amount
    total_pay: Amount
    deductions: Amount
    net_pay: Amount
    pay_date: datetime
    period_start: datetime | None = None
    idempotency_key: str | None = None


# ============================================================================
# Report schemas
# ============================================================================


class ReportRowResponse(CamelModel):
    """One employee's monthly totals."""

    employee_id: UUID
    name: str
    role: str
    month: int
    year: int
    total_hours: Amount
    total_pay: Amount
    total_deductions: Amount
    net_pay: Amount


class ReportFailureResponse(CamelModel):
    """An employee left out of the report."""

    employee_id: UUID
    message: str


class MonthlyReportResponse(CamelModel):
    """Monthly totals; totalExpense is the sum of netPay over results."""

    month: int
    year: int
    results: list[ReportRowResponse]
    total_expense: Amount
    errors: list[ReportFailureResponse] = []


# ============================================================================
# Generic schemas
# ============================================================================


class MessageResponse(BaseModel):
    """Schema for confirmation and error bodies."""

    message: str


class ValidationErrorResponse(BaseModel):
    """Schema for validation error response."""

    message: str
    errors: list[dict[str, Any]]
