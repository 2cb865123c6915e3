"""SQLAlchemy record store tests against SQLite."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from worklog_payroll.calculators import calendar_month_window, unpaid_window
from worklog_payroll.exceptions import ConcurrentDisbursementError, StoreError
from worklog_payroll.models import Employee, Payroll
from worklog_payroll.services import PayrollService
from worklog_payroll.store import SqlAlchemyRecordStore

from tests.conftest import FixedClock, make_log

pytestmark = pytest.mark.asyncio

UTC = timezone.utc
NOW = datetime(2025, 3, 20, 12, tzinfo=UTC)


async def add_employee(store, name="Alice", rate1="10", rate2="15") -> Employee:
    return await store.add_employee(
        Employee(name=name, role="Engineer", pay_rate1=Decimal(rate1), pay_rate2=Decimal(rate2))
    )


class TestEmployees:
    """Test employee persistence."""

    async def test_round_trip(self, sql_store):
        created = await add_employee(sql_store)

        fetched = await sql_store.get_employee(created.id)

        assert fetched is not None
        assert fetched.name == "Alice"
        assert fetched.pay_rate1 == Decimal("10")
        assert fetched.last_payroll_date is None

    async def test_list_sorted_by_name(self, sql_store):
        await add_employee(sql_store, name="Zed")
        await add_employee(sql_store, name="Amy")

        names = [e.name for e in await sql_store.list_employees()]

        assert names == ["Amy", "Zed"]

    async def test_update(self, sql_store):
        created = await add_employee(sql_store)

        updated = await sql_store.update_employee(
            created.id, {"role": "Lead", "pay_rate2": Decimal("20")}
        )

        assert updated.role == "Lead"
        assert updated.pay_rate2 == Decimal("20")

    async def test_update_missing(self, sql_store):
        assert await sql_store.update_employee(uuid4(), {"role": "Lead"}) is None

    async def test_delete_without_cascade_keeps_logs(self, sql_store):
        created = await add_employee(sql_store)
        await sql_store.add_work_log(make_log(created.id, NOW, hours_payrate1="1"))

        assert await sql_store.delete_employee(created.id) is True

        assert await sql_store.get_employee(created.id) is None
        assert len(await sql_store.list_work_logs(created.id)) == 1

    async def test_delete_with_cascade(self, sql_store):
        created = await add_employee(sql_store)
        await sql_store.add_work_log(make_log(created.id, NOW, hours_payrate1="1"))

        await sql_store.delete_employee(created.id, cascade=True)

        assert await sql_store.list_work_logs(created.id) == []

    async def test_delete_missing(self, sql_store):
        assert await sql_store.delete_employee(uuid4()) is False


class TestWorkLogQueries:
    """Test window filtering in SQL."""

    async def test_unpaid_window_excludes_lower_bound(self, sql_store):
        employee = await add_employee(sql_store)
        paid = datetime(2025, 3, 1, tzinfo=UTC)
        await sql_store.add_work_log(make_log(employee.id, paid, hours_payrate1="1"))
        await sql_store.add_work_log(
            make_log(employee.id, paid + timedelta(seconds=1), hours_payrate1="2")
        )

        logs = await sql_store.list_work_logs(employee.id, unpaid_window(paid, paid, NOW))

        assert [log.hours_payrate1 for log in logs] == [Decimal("2")]

    async def test_month_window_is_inclusive(self, sql_store):
        employee = await add_employee(sql_store)
        for when in [
            datetime(2025, 2, 28, 23, 59, 59, tzinfo=UTC),
            datetime(2025, 3, 1, tzinfo=UTC),
            datetime(2025, 3, 31, 23, 59, 59, tzinfo=UTC),
            datetime(2025, 4, 1, tzinfo=UTC),
        ]:
            await sql_store.add_work_log(make_log(employee.id, when, hours_payrate1="1"))

        logs = await sql_store.list_work_logs(employee.id, calendar_month_window(2025, 3))

        assert len(logs) == 2

    async def test_other_employees_excluded(self, sql_store):
        one = await add_employee(sql_store, name="One")
        two = await add_employee(sql_store, name="Two")
        await sql_store.add_work_log(make_log(one.id, NOW, hours_payrate1="1"))

        assert await sql_store.list_work_logs(two.id) == []


class TestRecordDisbursement:
    """Test the guarded two-write disbursement."""

    def payroll(self, employee_id, pay_date=NOW, key=None) -> Payroll:
        return Payroll(
            employee_id=employee_id,
            total_hours=Decimal("9"),
            total_pay=Decimal("110"),
            deductions=Decimal("2"),
            net_pay=Decimal("108"),
            pay_date=pay_date,
            idempotency_key=key,
        )

    async def test_writes_both_records(self, sql_store):
        employee = await add_employee(sql_store)

        recorded = await sql_store.record_disbursement(self.payroll(employee.id), None)

        assert recorded.id is not None
        assert [p.id for p in await sql_store.list_payrolls(employee.id)] == [recorded.id]
        refreshed = await sql_store.get_employee(employee.id)
        assert refreshed.last_payroll_date is not None

    async def test_stale_guard_writes_nothing(self, sql_store):
        employee = await add_employee(sql_store)
        await sql_store.record_disbursement(self.payroll(employee.id), None)

        with pytest.raises(ConcurrentDisbursementError):
            await sql_store.record_disbursement(
                self.payroll(employee.id, NOW + timedelta(hours=1)), None
            )

        assert len(await sql_store.list_payrolls(employee.id)) == 1

    async def test_find_by_key(self, sql_store):
        employee = await add_employee(sql_store)
        recorded = await sql_store.record_disbursement(
            self.payroll(employee.id, key="run-1"), None
        )

        found = await sql_store.find_payroll_by_key(employee.id, "run-1")

        assert found is not None and found.id == recorded.id
        assert await sql_store.find_payroll_by_key(employee.id, "run-2") is None


    async def test_same_key_allowed_for_another_employee(self, sql_store):
        one = await add_employee(sql_store, name="One")
        two = await add_employee(sql_store, name="Two")

        first = await sql_store.record_disbursement(self.payroll(one.id, key="run-1"), None)
        second = await sql_store.record_disbursement(self.payroll(two.id, key="run-1"), None)

        assert first.id != second.id
        assert (await sql_store.find_payroll_by_key(one.id, "run-1")).id == first.id
        assert (await sql_store.find_payroll_by_key(two.id, "run-1")).id == second.id


class TestWorkflowOverSql:
    """The payroll workflow against the SQL store."""

    async def test_fractional_rate_preview_matches_disbursement(
        self, sql_store, session_factory
    ):
        employee = await add_employee(sql_store, rate1="12.3456", rate2="7.0001")
        await sql_store.add_work_log(
            make_log(
                employee.id,
                datetime(2025, 3, 3, tzinfo=UTC),
                hours_payrate1="1.5",
                hours_payrate2="0.25",
                deduction="0.33",
            )
        )
        service = PayrollService(sql_store, clock=FixedClock(NOW))

        preview = await service.preview_pay(employee.id)
        payroll = await service.disburse_pay(employee.id)

        assert preview.period.total_pay == Decimal("20.268425")
        assert payroll.total_pay == preview.period.total_pay
        assert payroll.net_pay == preview.period.net_pay
        assert payroll.deductions == preview.period.deductions
        assert payroll.total_hours == preview.period.total_hours

        async with session_factory() as session:
            stored = (await SqlAlchemyRecordStore(session).list_payrolls(employee.id))[0]
        assert stored.total_pay == Decimal("20.268425")
        assert stored.net_pay == Decimal("19.938425")

    async def test_same_key_for_two_employees_pays_both(self, sql_store):
        one = await add_employee(sql_store, name="One")
        two = await add_employee(sql_store, name="Two")
        march = datetime(2025, 3, 3, tzinfo=UTC)
        await sql_store.add_work_log(make_log(one.id, march, hours_payrate1="1"))
        await sql_store.add_work_log(make_log(two.id, march, hours_payrate1="2"))
        service = PayrollService(sql_store, clock=FixedClock(NOW))

        paid_one = await service.disburse_pay(one.id, idempotency_key="run-1")
        paid_two = await service.disburse_pay(two.id, idempotency_key="run-1")
        replay = await service.disburse_pay(two.id, idempotency_key="run-1")

        assert paid_one.net_pay == Decimal("10")
        assert paid_two.net_pay == Decimal("20")
        assert replay.id == paid_two.id

    async def test_disburse_then_preview_is_zero(self, sql_store):
        employee = await add_employee(sql_store)
        await sql_store.add_work_log(
            make_log(employee.id, datetime(2025, 3, 3, tzinfo=UTC), hours_payrate1="5", deduction="2")
        )
        await sql_store.add_work_log(
            make_log(employee.id, datetime(2025, 3, 4, tzinfo=UTC), hours_payrate2="4")
        )
        clock = FixedClock(NOW)
        service = PayrollService(sql_store, clock=clock)

        preview = await service.preview_pay(employee.id)
        payroll = await service.disburse_pay(employee.id)
        clock.advance(hours=1)
        after = await service.preview_pay(employee.id)

        assert preview.period.net_pay == Decimal("108")
        assert payroll.net_pay == Decimal("108")
        assert payroll.total_hours == Decimal("9")
        assert after.period.total_hours == Decimal("0")
        assert after.period.net_pay == Decimal("0")

    async def test_monthly_report(self, sql_store):
        one = await add_employee(sql_store, name="One")
        two = await add_employee(sql_store, name="Two", rate1="20", rate2="0")
        march = datetime(2025, 3, 10, tzinfo=UTC)
        await sql_store.add_work_log(make_log(one.id, march, hours_payrate1="5", deduction="2"))
        await sql_store.add_work_log(make_log(two.id, march, hours_payrate1="1"))
        service = PayrollService(sql_store, clock=FixedClock(NOW))

        report = await service.monthly_report(month=3, year=2025)

        assert [row.name for row in report.results] == ["One", "Two"]
        assert report.total_expense == Decimal("68")


class TestStoreFailures:
    """Persistence errors surface as StoreError with the cause attached."""

    async def test_sqlalchemy_error_is_translated(self, sql_store, monkeypatch):
        async def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(sql_store.session, "execute", broken_execute)

        with pytest.raises(StoreError) as exc_info:
            await sql_store.list_employees()

        assert exc_info.value.operation == "list_employees"
        assert exc_info.value.message == "Server error"
        assert isinstance(exc_info.value.__cause__, OperationalError)
