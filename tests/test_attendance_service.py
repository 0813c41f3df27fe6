import pytest
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import func
from sqlalchemy.future import select

from backoffice.core.enums import WageType
from backoffice.core.exceptions import (
    InvalidIntervalError,
    MissingRateError,
    NotFoundError,
    UnsupportedCurrencyError,
)
from backoffice.models.attendance import Attendance
from backoffice.services.attendance_service import AttendanceService
from backoffice.services.employee_service import EmployeeService
from backoffice.services.store_service import StoreService


async def _count_attendance(session):
    result = await session.execute(select(func.count(Attendance.id)))
    return result.scalar()


async def _setup(session, **rates):
    store = await StoreService(session).create_store("Camden", supported_currencies=["EUR"])
    employee = await EmployeeService(session).create_employee(
        "Aoife Byrne", hourly_rate_eur=rates.get("hourly_rate_eur", "15.00")
    )
    return store, employee


@pytest.mark.asyncio
async def test_record_attendance_computes_hours_and_pay(session):
    store, employee = await _setup(session)
    svc = AttendanceService(session)

    record = await svc.record_attendance(
        employee.id,
        store.id,
        datetime(2024, 3, 4, 9, 0),
        datetime(2024, 3, 4, 15, 0),
        "EUR",
        notes="  opening shift ",
    )

    assert record.hours_worked == Decimal("6.00")
    assert record.amount_to_pay == 9000
    assert record.wage_type == WageType.HOURLY
    assert record.notes == "opening shift"


@pytest.mark.asyncio
async def test_record_attendance_accepts_iso_strings(session):
    store, employee = await _setup(session)
    svc = AttendanceService(session)

    record = await svc.record_attendance(
        employee.id, store.id, "2024-03-04T09:00:00Z", "2024-03-04T10:30:00+00:00", "eur"
    )

    assert record.check_in == datetime(2024, 3, 4, 9, 0)
    assert record.hours_worked == Decimal("1.50")
    assert record.amount_to_pay == 2250


@pytest.mark.asyncio
async def test_rejected_attendance_is_not_stored(session):
    store, employee = await _setup(session)
    svc = AttendanceService(session)
    check_in = datetime(2024, 3, 4, 9, 0)

    with pytest.raises(InvalidIntervalError):
        await svc.record_attendance(employee.id, store.id, check_in, check_in, "EUR")

    with pytest.raises(UnsupportedCurrencyError):
        await svc.record_attendance(
            employee.id, store.id, check_in, datetime(2024, 3, 4, 10, 0), "GBP"
        )

    with pytest.raises(NotFoundError):
        await svc.record_attendance(
            999, store.id, check_in, datetime(2024, 3, 4, 10, 0), "EUR"
        )

    assert await _count_attendance(session) == 0


@pytest.mark.asyncio
async def test_missing_rate_for_store_currency(session):
    store = await StoreService(session).create_store(
        "Belfast", supported_currencies=["EUR", "GBP"]
    )
    employee = await EmployeeService(session).create_employee(
        "Ciaran Doyle", hourly_rate_eur="12.00"
    )

    with pytest.raises(MissingRateError):
        await AttendanceService(session).record_attendance(
            employee.id,
            store.id,
            datetime(2024, 3, 4, 9, 0),
            datetime(2024, 3, 4, 17, 0),
            "GBP",
        )
    assert await _count_attendance(session) == 0


@pytest.mark.asyncio
async def test_update_attendance_recomputes(session):
    store, employee = await _setup(session)
    svc = AttendanceService(session)
    record = await svc.record_attendance(
        employee.id, store.id, datetime(2024, 3, 4, 9, 0), datetime(2024, 3, 4, 15, 0), "EUR"
    )

    updated = await svc.update_attendance(record.id, check_out=datetime(2024, 3, 4, 17, 0))
    assert updated.hours_worked == Decimal("8.00")
    assert updated.amount_to_pay == 12000

    with pytest.raises(InvalidIntervalError):
        await svc.update_attendance(record.id, check_out=datetime(2024, 3, 4, 8, 0))


@pytest.mark.asyncio
async def test_update_attendance_uses_current_rate(session):
    store, employee = await _setup(session)
    svc = AttendanceService(session)
    record = await svc.record_attendance(
        employee.id, store.id, datetime(2024, 3, 4, 9, 0), datetime(2024, 3, 4, 11, 0), "EUR"
    )
    assert record.amount_to_pay == 3000

    await EmployeeService(session).update_employee(employee.id, hourly_rate_eur="16.50")
    updated = await svc.update_attendance(record.id, notes="rate corrected")

    assert updated.amount_to_pay == 3300
    assert updated.notes == "rate corrected"


@pytest.mark.asyncio
async def test_list_attendance_period_is_inclusive(session):
    store, employee = await _setup(session)
    svc = AttendanceService(session)
    for day in (3, 4, 5):
        await svc.record_attendance(
            employee.id,
            store.id,
            datetime(2024, 3, day, 22, 0),
            datetime(2024, 3, day, 23, 30),
            "EUR",
        )

    records = await svc.list_attendance(
        employee_id=employee.id, start_date=date(2024, 3, 4), end_date=date(2024, 3, 5)
    )
    assert [record.check_in.day for record in records] == [5, 4]

    records = await svc.list_attendance(start_date=date(2024, 3, 5))
    assert len(records) == 1
