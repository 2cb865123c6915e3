"""Exception hierarchy for payroll operations.

Every error carries the HTTP status the API layer should answer with and
a client-safe message. Internal detail (the original cause of a store
failure) travels on ``__cause__`` and is logged, never returned.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID


class PayrollError(Exception):
    """Base exception for payroll operations."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class EmployeeNotFoundError(PayrollError):
    """Raised when an employee id does not resolve to a record."""

    status_code = 404

    def __init__(self, employee_id: UUID | str):
        self.employee_id = employee_id
        super().__init__("Employee not found")


class PayrollValidationError(PayrollError):
    """Malformed input rejected at the boundary."""

    status_code = 422

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class StoreError(PayrollError):
    """Underlying persistence failure."""

    status_code = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("Server error")


class ConcurrentDisbursementError(PayrollError):
    """Another disbursement advanced last_payroll_date first."""

    status_code = 409

    def __init__(self, employee_id: UUID):
        self.employee_id = employee_id
        super().__init__(
            "Payroll for this employee was finalized concurrently; retry the request"
        )
