"""ORM models."""

from worklog_payroll.models.base import Base, TimestampMixin
from worklog_payroll.models.employee import Employee
from worklog_payroll.models.payroll import Payroll, WorkLog

__all__ = [
    "Base",
    "TimestampMixin",
    "Employee",
    "Payroll",
    "WorkLog",
]
