"""Payroll workflow: preview, disbursement and monthly reporting.

All three operations share ``compute_period``; they differ only in the
window that selects work logs and in what happens with the result:

- preview_pay: unpaid window, read only
- disburse_pay: unpaid window, then closes the period by writing a
  Payroll record and advancing the employee's last_payroll_date
- monthly_report: calendar-month window per employee, read only
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

from worklog_payroll.calculators import (
    PeriodResult,
    calendar_month_window,
    compute_period,
    resolve_report_period,
    unpaid_window,
)
from worklog_payroll.config import DEFAULT_PAYROLL_EPOCH
from worklog_payroll.exceptions import ConcurrentDisbursementError, EmployeeNotFoundError
from worklog_payroll.models import Employee, Payroll
from worklog_payroll.services.locks import EmployeeLocks
from worklog_payroll.store.base import RecordStore

logger = logging.getLogger(__name__)

# Report selector meaning "every employee"
ALL_EMPLOYEES = "all"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PreviewResult:
    """Pay owed since the last payout, computed without side effects."""

    employee_id: UUID
    period: PeriodResult
    last_pay_date: datetime
    preview_date: datetime


@dataclass
class ReportRow:
    """One employee's totals for a calendar month."""

    employee_id: UUID
    name: str
    role: str
    month: int
    year: int
    total_hours: Decimal
    total_pay: Decimal
    total_deductions: Decimal
    net_pay: Decimal


@dataclass
class ReportFailure:
    """An employee skipped because their data could not be aggregated."""

    employee_id: UUID
    message: str


@dataclass
class MonthlyReport:
    """Monthly totals across the selected employees."""

    month: int
    year: int
    results: list[ReportRow] = field(default_factory=list)
    total_expense: Decimal = Decimal("0")
    errors: list[ReportFailure] = field(default_factory=list)


class PayrollService:
    """Service for computing and finalizing employee pay.

    Operations:
    - preview_pay: what would be paid now, no writes
    - disburse_pay: pay and close the unpaid window
    - monthly_report: per-employee totals for one calendar month
    """

    def __init__(
        self,
        store: RecordStore,
        payroll_epoch: datetime = DEFAULT_PAYROLL_EPOCH,
        clock: Callable[[], datetime] = utc_now,
        locks: EmployeeLocks | None = None,
    ):
        self.store = store
        self.payroll_epoch = payroll_epoch
        self.clock = clock
        self.locks = locks if locks is not None else EmployeeLocks()

    async def preview_pay(self, employee_id: UUID) -> PreviewResult:
        """Compute pay owed since the employee's last payout.

        Raises EmployeeNotFoundError if the employee does not exist.
        """
        employee = await self._require_employee(employee_id)
        now = self.clock()
        window = unpaid_window(employee.last_payroll_date, self.payroll_epoch, now)
        logs = await self.store.list_work_logs(employee.id, window)

        return PreviewResult(
            employee_id=employee.id,
            period=compute_period(employee, logs),
            last_pay_date=window.start,
            preview_date=now,
        )

    async def disburse_pay(
        self,
        employee_id: UUID,
        idempotency_key: str | None = None,
    ) -> Payroll:
        """Pay the unpaid window and advance last_payroll_date.

        Args:
            employee_id: Employee to pay
            idempotency_key: Optional caller token; a retry with a key
                already recorded for this employee returns that payroll
                instead of paying again

        Returns:
            The persisted Payroll record

        Raises:
            EmployeeNotFoundError: unknown employee
            ConcurrentDisbursementError: another disbursement for the same
                employee committed between our read and our write
        """
        async with self.locks.hold(employee_id):
            employee = await self._require_employee(employee_id)

            if idempotency_key:
                existing = await self.store.find_payroll_by_key(
                    employee.id, idempotency_key
                )
                if existing is not None:
                    logger.info(
                        "Replayed payroll %s for employee %s (idempotency key %s)",
                        existing.id,
                        employee.id,
                        idempotency_key,
                    )
                    return existing

            expected_last_paid = employee.last_payroll_date
            paid_at = self.clock()
            window = unpaid_window(expected_last_paid, self.payroll_epoch, paid_at)
            logs = await self.store.list_work_logs(employee.id, window)
            period = compute_period(employee, logs)

            payroll = Payroll(
                employee_id=employee.id,
                total_hours=period.total_hours,
                total_pay=period.total_pay,
                deductions=period.deductions,
                net_pay=period.net_pay,
                pay_date=paid_at,
                period_start=window.start,
                idempotency_key=idempotency_key,
            )

            try:
                recorded = await self.store.record_disbursement(
                    payroll, expected_last_paid
                )
            except ConcurrentDisbursementError:
                logger.warning(
                    "Disbursement for employee %s lost the last_payroll_date race",
                    employee_id,
                )
                raise

            logger.info(
                "Disbursed payroll %s for employee %s: %s logs, net pay %s",
                recorded.id,
                employee_id,
                period.log_count,
                period.net_pay,
            )
            return recorded

    async def monthly_report(
        self,
        month: int | None = None,
        year: int | None = None,
        employee_id: UUID | str | None = None,
    ) -> MonthlyReport:
        """Aggregate each selected employee's logs over one calendar month.

        ``employee_id`` of None or "all" selects every employee. An id that
        does not resolve yields an empty report rather than an error.
        totalExpense sums net pay, so deductions reduce it.
        """
        month, year = resolve_report_period(month, year, self.clock().date())
        report = MonthlyReport(month=month, year=year)
        window = calendar_month_window(year, month)

        employees = await self._select_employees(employee_id)

        for employee in employees:
            try:
                logs = await self.store.list_work_logs(employee.id, window)
                period = compute_period(employee, logs)
            except (ArithmeticError, TypeError, ValueError) as e:
                logger.exception(
                    "Skipping employee %s in %04d-%02d report", employee.id, year, month
                )
                report.errors.append(ReportFailure(employee_id=employee.id, message=str(e)))
                continue

            report.total_expense += period.net_pay
            report.results.append(
                ReportRow(
                    employee_id=employee.id,
                    name=employee.name,
                    role=employee.role,
                    month=month,
                    year=year,
                    total_hours=period.total_hours,
                    total_pay=period.total_pay,
                    total_deductions=period.deductions,
                    net_pay=period.net_pay,
                )
            )

        return report

    async def _select_employees(self, selector: UUID | str | None) -> list[Employee]:
        if not selector or selector == ALL_EMPLOYEES:
            return await self.store.list_employees()

        if isinstance(selector, str):
            try:
                selector = UUID(selector)
            except ValueError:
                return []

        employee = await self.store.get_employee(selector)
        return [employee] if employee is not None else []

    async def _require_employee(self, employee_id: UUID) -> Employee:
        employee = await self.store.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee
