"""Pay preview, disbursement and payroll history endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Header, Path

from worklog_payroll.api.dependencies import EmployeeServiceDep, PayrollServiceDep
from worklog_payroll.api.schemas import (
    MessageResponse,
    PayrollResponse,
    PreviewResponse,
)

router = APIRouter(tags=["payroll"])


@router.get(
    "/preview-pay/{employee_id}",
    response_model=PreviewResponse,
    responses={404: {"model": MessageResponse}},
)
async def preview_pay(
    service: PayrollServiceDep,
    employee_id: Annotated[UUID, Path()],
) -> PreviewResponse:
    """Pay owed since the last payout. Read only and repeatable."""
    preview = await service.preview_pay(employee_id)
    period = preview.period
    return PreviewResponse(
        employee_id=preview.employee_id,
        total_hours=period.total_hours,
        total_pay=period.total_pay,
        deductions=period.deductions,
        net_pay=period.net_pay,
        last_pay_date=preview.last_pay_date,
        preview_date=preview.preview_date,
    )


@router.post(
    "/disburse-pay/{employee_id}",
    response_model=PayrollResponse,
    responses={404: {"model": MessageResponse}, 409: {"model": MessageResponse}},
)
async def disburse_pay(
    service: PayrollServiceDep,
    employee_id: Annotated[UUID, Path()],
    idempotency_key: Annotated[str | None, Header()] = None,
) -> PayrollResponse:
    """Pay the unpaid window and advance the employee's last payroll date."""
    payroll = await service.disburse_pay(employee_id, idempotency_key=idempotency_key)
    return PayrollResponse.model_validate(payroll)


@router.get("/payrolls/{employee_id}", response_model=list[PayrollResponse])
async def list_payrolls(
    service: EmployeeServiceDep,
    employee_id: Annotated[UUID, Path()],
) -> list[PayrollResponse]:
    """Payroll history for an employee, newest first."""
    payrolls = await service.list_payrolls(employee_id)
    return [PayrollResponse.model_validate(p) for p in payrolls]
