"""Payroll services."""

from worklog_payroll.services.employee_service import EmployeeService, WorkLogService
from worklog_payroll.services.locks import EmployeeLocks
from worklog_payroll.services.payroll_service import (
    ALL_EMPLOYEES,
    MonthlyReport,
    PayrollService,
    PreviewResult,
    ReportFailure,
    ReportRow,
)

__all__ = [
    "ALL_EMPLOYEES",
    "EmployeeLocks",
    "EmployeeService",
    "MonthlyReport",
    "PayrollService",
    "PreviewResult",
    "ReportFailure",
    "ReportRow",
    "WorkLogService",
]
