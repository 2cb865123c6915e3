"""Record store protocol consumed by the payroll services."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from worklog_payroll.calculators.windows import DateWindow
from worklog_payroll.models import Employee, Payroll, WorkLog

# Fields an employee edit may touch
EMPLOYEE_MUTABLE_FIELDS = frozenset(
    {"name", "role", "pay_rate1", "pay_rate2", "last_payroll_date"}
)


class RecordStore(Protocol):
    """Durable storage for employees, work logs and payroll records.

    Implementations raise ``StoreError`` for any persistence failure and
    keep the original exception as its cause.
    """

    async def ping(self) -> None:
        """Round-trip to the backing storage."""
        ...

    async def list_employees(self) -> list[Employee]:
        ...

    async def get_employee(self, employee_id: UUID) -> Employee | None:
        ...

    async def add_employee(self, employee: Employee) -> Employee:
        ...

    async def update_employee(
        self, employee_id: UUID, changes: dict[str, Any]
    ) -> Employee | None:
        """Apply ``changes`` and return the updated row, or None if absent."""
        ...

    async def delete_employee(self, employee_id: UUID, cascade: bool = False) -> bool:
        """Delete an employee; with ``cascade`` also its logs and payrolls."""
        ...

    async def add_work_log(self, log: WorkLog) -> WorkLog:
        ...

    async def list_work_logs(
        self, employee_id: UUID, window: DateWindow | None = None
    ) -> list[WorkLog]:
        """Logs of one employee, optionally restricted to ``window``, oldest first."""
        ...

    async def list_payrolls(self, employee_id: UUID) -> list[Payroll]:
        """Payroll history of one employee, newest first."""
        ...

    async def find_payroll_by_key(
        self, employee_id: UUID, idempotency_key: str
    ) -> Payroll | None:
        ...

    async def record_disbursement(
        self, payroll: Payroll, expected_last_paid: datetime | None
    ) -> Payroll:
        """Close a pay period atomically.

        Advances the employee's last_payroll_date to ``payroll.pay_date``
        only if it still equals ``expected_last_paid``, and inserts
        ``payroll`` in the same unit of work. Raises
        ``ConcurrentDisbursementError`` without writing anything when the
        guard fails.
        """
        ...
