"""Employee CRUD endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from worklog_payroll.api.dependencies import EmployeeServiceDep
from worklog_payroll.api.schemas import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    MessageResponse,
    ValidationErrorResponse,
)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(service: EmployeeServiceDep) -> list[EmployeeResponse]:
    """List all employees."""
    employees = await service.list_employees()
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.post(
    "",
    response_model=EmployeeResponse,
    responses={422: {"model": ValidationErrorResponse}},
)
async def create_employee(
    service: EmployeeServiceDep,
    payload: EmployeeCreate,
) -> EmployeeResponse:
    """Create an employee."""
    employee = await service.create_employee(**payload.model_dump())
    return EmployeeResponse.model_validate(employee)


@router.put(
    "/{employee_id}",
    response_model=EmployeeResponse | None,
    responses={422: {"model": ValidationErrorResponse}},
)
async def update_employee(
    service: EmployeeServiceDep,
    employee_id: Annotated[UUID, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse | None:
    """Apply the provided fields. Answers null when the employee is absent."""
    employee = await service.update_employee(
        employee_id, payload.model_dump(exclude_unset=True)
    )
    if employee is None:
        return None
    return EmployeeResponse.model_validate(employee)


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(
    service: EmployeeServiceDep,
    employee_id: Annotated[UUID, Path()],
) -> MessageResponse:
    """Delete an employee. Work logs and payroll history are kept by default."""
    await service.delete_employee(employee_id)
    return MessageResponse(message="Employee Deleted")
