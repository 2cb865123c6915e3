"""Reporting endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from worklog_payroll.api.dependencies import PayrollServiceDep
from worklog_payroll.api.schemas import (
    MonthlyReportResponse,
    ReportFailureResponse,
    ReportRowResponse,
)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/monthly", response_model=MonthlyReportResponse)
async def monthly_report(
    service: PayrollServiceDep,
    month: Annotated[int | None, Query(ge=1, le=12)] = None,
    year: Annotated[int | None, Query(ge=1, le=9999)] = None,
    employee_id: Annotated[str | None, Query(alias="employeeId")] = None,
) -> MonthlyReportResponse:
    """Per-employee totals for one calendar month.

    employeeId=all (or omitted) covers every employee. An unknown id gives
    an empty report, not a 404.
    """
    report = await service.monthly_report(
        month=month, year=year, employee_id=employee_id
    )
    return MonthlyReportResponse(
        month=report.month,
        year=report.year,
        results=[ReportRowResponse.model_validate(row) for row in report.results],
        total_expense=report.total_expense,
        errors=[ReportFailureResponse.model_validate(f) for f in report.errors],
    )
