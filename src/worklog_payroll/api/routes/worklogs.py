"""Work log endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from worklog_payroll.api.dependencies import WorkLogServiceDep
from worklog_payroll.api.schemas import (
    ValidationErrorResponse,
    WorkLogCreate,
    WorkLogResponse,
)

router = APIRouter(prefix="/worklogs", tags=["worklogs"])


@router.post(
    "",
    response_model=WorkLogResponse,
    responses={422: {"model": ValidationErrorResponse}},
)
async def create_work_log(
    service: WorkLogServiceDep,
    payload: WorkLogCreate,
) -> WorkLogResponse:
    """Record one day of work."""
    log = await service.create_work_log(**payload.model_dump())
    return WorkLogResponse.model_validate(log)


@router.get("/{employee_id}", response_model=list[WorkLogResponse])
async def list_work_logs(
    service: WorkLogServiceDep,
    employee_id: Annotated[UUID, Path()],
) -> list[WorkLogResponse]:
    """All work logs recorded for an employee."""
    logs = await service.list_work_logs(employee_id)
    return [WorkLogResponse.model_validate(log) for log in logs]
