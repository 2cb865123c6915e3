"""API routes."""

from worklog_payroll.api.routes.employees import router as employees_router
from worklog_payroll.api.routes.health import router as health_router
from worklog_payroll.api.routes.payroll import router as payroll_router
from worklog_payroll.api.routes.reports import router as reports_router
from worklog_payroll.api.routes.worklogs import router as worklogs_router

__all__ = [
    "employees_router",
    "health_router",
    "payroll_router",
    "reports_router",
    "worklogs_router",
]
