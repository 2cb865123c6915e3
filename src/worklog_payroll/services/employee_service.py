"""Employee and work log record keeping."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from worklog_payroll.exceptions import PayrollValidationError
from worklog_payroll.models import Employee, Payroll, WorkLog
from worklog_payroll.store.base import EMPLOYEE_MUTABLE_FIELDS, RecordStore

logger = logging.getLogger(__name__)


def _require_non_negative(values: dict[str, Decimal | None]) -> None:
    errors = [
        {"field": name, "message": "must be greater than or equal to 0"}
        for name, value in values.items()
        if value is not None and value < 0
    ]
    if errors:
        fields = ", ".join(error["field"] for error in errors)
        raise PayrollValidationError(f"Negative values are not allowed: {fields}", errors)


class EmployeeService:
    """CRUD over employees.

    Deleting an employee leaves its work logs and payroll history in place
    unless ``cascade_delete`` is enabled.
    """

    def __init__(self, store: RecordStore, cascade_delete: bool = False):
        self.store = store
        self.cascade_delete = cascade_delete

    async def list_employees(self) -> list[Employee]:
        return await self.store.list_employees()

    async def create_employee(
        self,
        name: str,
        role: str = "",
        pay_rate1: Decimal = Decimal("0"),
        pay_rate2: Decimal = Decimal("0"),
        last_payroll_date: datetime | None = None,
    ) -> Employee:
        _require_non_negative({"pay_rate1": pay_rate1, "pay_rate2": pay_rate2})
        if not name or not name.strip():
            raise PayrollValidationError(
                "Employee name is required",
                [{"field": "name", "message": "must not be empty"}],
            )

        employee = await self.store.add_employee(
            Employee(
                name=name,
                role=role,
                pay_rate1=pay_rate1,
                pay_rate2=pay_rate2,
                last_payroll_date=last_payroll_date,
            )
        )
        logger.info("Created employee %s", employee.id)
        return employee

    async def update_employee(
        self, employee_id: UUID, changes: dict[str, Any]
    ) -> Employee | None:
        """Apply a partial edit. Returns None when the employee is absent."""
        unknown = set(changes) - EMPLOYEE_MUTABLE_FIELDS
        if unknown:
            raise PayrollValidationError(
                f"Unknown employee fields: {', '.join(sorted(unknown))}",
                [{"field": name, "message": "unknown field"} for name in sorted(unknown)],
            )
        _require_non_negative(
            {name: changes.get(name) for name in ("pay_rate1", "pay_rate2")}
        )
        if "name" in changes and not (changes["name"] or "").strip():
            raise PayrollValidationError(
                "Employee name is required",
                [{"field": "name", "message": "must not be empty"}],
            )

        return await self.store.update_employee(employee_id, changes)

    async def delete_employee(self, employee_id: UUID) -> bool:
        deleted = await self.store.delete_employee(
            employee_id, cascade=self.cascade_delete
        )
        if deleted:
            logger.info(
                "Deleted employee %s (cascade=%s)", employee_id, self.cascade_delete
            )
        return deleted

    async def list_payrolls(self, employee_id: UUID) -> list[Payroll]:
        return await self.store.list_payrolls(employee_id)


class WorkLogService:
    """Ingestion and listing of daily work logs.

    Logs are never updated or deleted once written. The employee
    reference is not checked: logs may exist for removed employees.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def create_work_log(
        self,
        employee_id: UUID,
        date: datetime,
        hours_payrate1: Decimal = Decimal("0"),
        hours_payrate2: Decimal = Decimal("0"),
        deduction: Decimal = Decimal("0"),
    ) -> WorkLog:
        _require_non_negative(
            {
                "hours_payrate1": hours_payrate1,
                "hours_payrate2": hours_payrate2,
                "deduction": deduction,
            }
        )
        return await self.store.add_work_log(
            WorkLog(
                employee_id=employee_id,
                date=date,
                hours_payrate1=hours_payrate1,
                hours_payrate2=hours_payrate2,
                deduction=deduction,
            )
        )

    async def list_work_logs(self, employee_id: UUID) -> list[WorkLog]:
        return await self.store.list_work_logs(employee_id)
