import pytest
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

from backoffice.core.enums import Currency, WageType
from backoffice.core.exceptions import NotFoundError
from backoffice.services.attendance_service import AttendanceService
from backoffice.services.employee_service import EmployeeService
from backoffice.services.payment_service import PaymentService
from backoffice.services.payroll_aggregator import PayrollAggregator, compute_earned
from backoffice.services.store_service import StoreService

WEEK_START = date(2024, 3, 4)
WEEK_END = date(2024, 3, 10)


def _record(check_in, amount, wage_type=None):
    return SimpleNamespace(check_in=check_in, amount_to_pay=amount, wage_type=wage_type)


def test_compute_earned_sums_hourly_records():
    records = [
        _record(datetime(2024, 3, 4, 9), 9000, WageType.HOURLY),
        _record(datetime(2024, 3, 5, 9), 4500, WageType.HOURLY),
    ]
    assert compute_earned(records) == 13500


def test_compute_earned_counts_fixed_wage_once_per_week():
    records = [
        _record(datetime(2024, 3, 6, 9), 52000, WageType.FIXED),
        _record(datetime(2024, 3, 4, 9), 50000, WageType.FIXED),
        _record(datetime(2024, 3, 11, 9), 50000, WageType.FIXED),
    ]
    # earliest check-in of the first week wins
    assert compute_earned(records) == 100000


def test_compute_earned_uses_default_wage_type_without_snapshot():
    records = [
        _record(datetime(2024, 3, 4, 9), 50000),
        _record(datetime(2024, 3, 5, 9), 50000),
    ]
    assert compute_earned(records, WageType.FIXED) == 50000
    assert compute_earned(records) == 100000


def test_compute_earned_iso_week_crosses_year():
    records = [
        _record(datetime(2024, 12, 30, 9), 50000, WageType.FIXED),
        _record(datetime(2025, 1, 2, 9), 50000, WageType.FIXED),
    ]
    assert compute_earned(records) == 50000


async def _hourly_setup(session):
    store_svc = StoreService(session)
    store = await store_svc.create_store("Belfast", supported_currencies=["EUR", "GBP"])
    employee = await EmployeeService(session).create_employee(
        "Niamh Kelly", hourly_rate_eur="15.00", hourly_rate_gbp="12.00"
    )
    await store_svc.assign_employee(store.id, employee.id)
    return store, employee


@pytest.mark.asyncio
async def test_fixed_employee_paid_once_for_two_shifts(session):
    store = await StoreService(session).create_store("Camden")
    employee = await EmployeeService(session).create_employee(
        "Sean Walsh", wage_type="FIXED", weekly_wage_eur="500"
    )
    attendance = AttendanceService(session)
    await attendance.record_attendance(
        employee.id, store.id, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 17), "EUR"
    )
    await attendance.record_attendance(
        employee.id, store.id, datetime(2024, 3, 6, 9), datetime(2024, 3, 6, 13), "EUR"
    )

    summary = await PayrollAggregator(session).summarize(
        employee.id, "EUR", WEEK_START, WEEK_END
    )

    assert summary.earned == 50000
    assert summary.paid == 0
    assert summary.balance == 50000
    assert summary.hours_worked == Decimal("12.00")


@pytest.mark.asyncio
async def test_balance_is_earned_minus_paid(session):
    store, employee = await _hourly_setup(session)
    await AttendanceService(session).record_attendance(
        employee.id, store.id, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 15), "EUR"
    )
    payments = PaymentService(session)
    await payments.record_payment(employee.id, 5000, "EUR", "CASH", date(2024, 3, 8))
    # outside the period
    await payments.record_payment(employee.id, 7000, "EUR", "CASH", date(2024, 3, 11))

    summary = await PayrollAggregator(session).summarize(
        employee.id, Currency.EUR, WEEK_START, WEEK_END
    )

    assert summary.earned == 9000
    assert summary.paid == 5000
    assert summary.balance == 4000


@pytest.mark.asyncio
async def test_period_end_day_is_included(session):
    store, employee = await _hourly_setup(session)
    await AttendanceService(session).record_attendance(
        employee.id, store.id, datetime(2024, 3, 10, 20), datetime(2024, 3, 10, 23), "EUR"
    )
    await AttendanceService(session).record_attendance(
        employee.id, store.id, datetime(2024, 3, 11, 0, 30), datetime(2024, 3, 11, 2), "EUR"
    )

    summary = await PayrollAggregator(session).summarize(
        employee.id, "EUR", WEEK_START, WEEK_END
    )
    assert summary.earned == 4500


@pytest.mark.asyncio
async def test_currencies_never_mix(session):
    store, employee = await _hourly_setup(session)
    attendance = AttendanceService(session)
    await attendance.record_attendance(
        employee.id, store.id, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 15), "EUR"
    )
    await attendance.record_attendance(
        employee.id, store.id, datetime(2024, 3, 5, 9), datetime(2024, 3, 5, 13), "GBP"
    )
    await PaymentService(session).record_payment(
        employee.id, 6000, "GBP", "ACCOUNT", date(2024, 3, 9)
    )

    aggregator = PayrollAggregator(session)
    eur = await aggregator.summarize(employee.id, "EUR", WEEK_START, WEEK_END)
    gbp = await aggregator.summarize(employee.id, "GBP", WEEK_START, WEEK_END)

    assert (eur.earned, eur.paid, eur.balance) == (9000, 0, 9000)
    assert (gbp.earned, gbp.paid, gbp.balance) == (4800, 6000, -1200)


@pytest.mark.asyncio
async def test_run_payroll_covers_each_active_currency(session):
    store, employee = await _hourly_setup(session)
    idle = await EmployeeService(session).create_employee("Aaron Idle", hourly_rate_eur="10")
    await AttendanceService(session).record_attendance(
        employee.id, store.id, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 15), "EUR"
    )
    await PaymentService(session).record_payment(
        employee.id, 1000, "GBP", "CASH", date(2024, 3, 5)
    )

    summaries = await PayrollAggregator(session).run_payroll(WEEK_START, WEEK_END)

    assert [(s.employee_id, s.currency) for s in summaries] == [
        (employee.id, Currency.EUR),
        (employee.id, Currency.GBP),
    ]
    assert summaries[1].balance == -1000
    assert all(s.employee_id != idle.id for s in summaries)


@pytest.mark.asyncio
async def test_summarize_unknown_employee(session):
    with pytest.raises(NotFoundError):
        await PayrollAggregator(session).summarize(42, "EUR", WEEK_START, WEEK_END)


@pytest.mark.asyncio
async def test_summarize_rejects_reversed_period(session):
    _, employee = await _hourly_setup(session)
    with pytest.raises(ValueError):
        await PayrollAggregator(session).summarize(employee.id, "EUR", WEEK_END, WEEK_START)
