"""Record store implementations."""

from worklog_payroll.store.base import RecordStore
from worklog_payroll.store.memory import InMemoryRecordStore
from worklog_payroll.store.sqlalchemy_store import SqlAlchemyRecordStore

__all__ = ["RecordStore", "InMemoryRecordStore", "SqlAlchemyRecordStore"]
