"""FastAPI dependencies for dependency injection."""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from worklog_payroll.config import Settings
from worklog_payroll.exceptions import StoreError
from worklog_payroll.services import (
    EmployeeService,
    PayrollService,
    WorkLogService,
)
from worklog_payroll.store import RecordStore, SqlAlchemyRecordStore

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Session from the factory the app was created or started with."""
    factory = request.app.state.session_factory
    if factory is None:
        logger.error("No session factory: app lifespan has not run")
        raise StoreError("open_session")
    async with factory() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_record_store(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> RecordStore:
    """Record store bound to the request's session."""
    return SqlAlchemyRecordStore(session)


AppSettings = Annotated[Settings, Depends(get_app_settings)]
Store = Annotated[RecordStore, Depends(get_record_store)]


def get_payroll_service(
    request: Request, store: Store, settings: AppSettings
) -> PayrollService:
    return PayrollService(
        store,
        payroll_epoch=settings.payroll_epoch,
        locks=request.app.state.employee_locks,
    )


def get_employee_service(store: Store, settings: AppSettings) -> EmployeeService:
    return EmployeeService(store, cascade_delete=settings.cascade_employee_delete)


def get_work_log_service(store: Store) -> WorkLogService:
    return WorkLogService(store)


# Type aliases for cleaner dependency injection
PayrollServiceDep = Annotated[PayrollService, Depends(get_payroll_service)]
EmployeeServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]
WorkLogServiceDep = Annotated[WorkLogService, Depends(get_work_log_service)]
