import pytest
from datetime import date, datetime
from unittest.mock import patch
from sqlalchemy import func
from sqlalchemy.future import select

from backoffice.core.enums import Currency
from backoffice.core.exceptions import NotFoundError
from backoffice.models import Attendance, Delivery, Expense, Sale, StoreDriver, StoreEmployee
from backoffice.repositories.assignment_repository import StoreEmployeeRepository
from backoffice.services.attendance_service import AttendanceService
from backoffice.services.delivery_ledger import DeliveryLedger
from backoffice.services.driver_service import DriverService
from backoffice.services.employee_service import EmployeeService
from backoffice.services.expense_lifecycle import ExpenseService
from backoffice.services.sales_reconciler import SalesReconciler
from backoffice.services.store_service import StoreService
from backoffice.services.vendor_service import VendorService


async def _count(session, model):
    result = await session.execute(select(func.count(model.id)))
    return result.scalar()


@pytest.mark.asyncio
async def test_create_store_normalises_currencies(session):
    svc = StoreService(session)

    store = await svc.create_store("  Camden  ")
    assert store.name == "Camden"
    assert store.supported_currencies == ["EUR"]
    assert store.default_currency == Currency.EUR

    store = await svc.create_store("Belfast", supported_currencies=["EUR"], default_currency="GBP")
    assert store.supported_currencies == ["EUR", "GBP"]
    assert store.default_currency == Currency.GBP


@pytest.mark.asyncio
async def test_create_store_requires_name(session):
    with pytest.raises(ValueError):
        await StoreService(session).create_store("   ")


@pytest.mark.asyncio
async def test_update_store_keeps_default_in_supported_set(session):
    svc = StoreService(session)
    store = await svc.create_store("Belfast", supported_currencies=["EUR", "GBP"], default_currency="GBP")

    updated = await svc.update_store(store.id, supported_currencies=["EUR"])
    assert updated.default_currency == Currency.GBP
    assert updated.supported_currencies == ["EUR", "GBP"]

    updated = await svc.update_store(store.id, manager_name="Orla", phone="")
    assert updated.manager_name == "Orla"
    assert updated.phone is None


@pytest.mark.asyncio
async def test_list_stores_newest_first(session):
    svc = StoreService(session)
    first = await svc.create_store("First")
    second = await svc.create_store("Second")

    stores = await svc.list_stores()
    assert [s.id for s in stores] == [second.id, first.id]


@pytest.mark.asyncio
async def test_assign_employee_twice_returns_same_link(session):
    svc = StoreService(session)
    store = await svc.create_store("Camden")
    employee = await EmployeeService(session).create_employee("Aoife Byrne")

    first = await svc.assign_employee(store.id, employee.id)
    second = await svc.assign_employee(store.id, employee.id)

    assert first.id == second.id
    assert await _count(session, StoreEmployee) == 1


@pytest.mark.asyncio
async def test_concurrent_assignment_returns_existing_link(session):
    svc = StoreService(session)
    store = await svc.create_store("Camden")
    employee = await EmployeeService(session).create_employee("Aoife Byrne")
    existing = await svc.assign_employee(store.id, employee.id)
    existing_id = existing.id
    store_id, employee_id = store.id, employee.id

    original_get_by_key = StoreEmployeeRepository.get_by_key
    calls = []

    async def miss_first_lookup(self, *args):
        calls.append(args)
        if len(calls) == 1:
            return None
        return await original_get_by_key(self, *args)

    with patch.object(StoreEmployeeRepository, "get_by_key", new=miss_first_lookup):
        link = await svc.assign_employee(store_id, employee_id)

    assert link.id == existing_id
    assert await _count(session, StoreEmployee) == 1


@pytest.mark.asyncio
async def test_assign_unknown_entities(session):
    svc = StoreService(session)
    store = await svc.create_store("Camden")

    with pytest.raises(NotFoundError):
        await svc.assign_employee(store.id, 999)
    with pytest.raises(NotFoundError):
        await svc.assign_driver(999, 1)


@pytest.mark.asyncio
async def test_unassign(session):
    svc = StoreService(session)
    store = await svc.create_store("Camden")
    driver = await DriverService(session).create_driver("Tom Hale")
    await svc.assign_driver(store.id, driver.id)

    assert [link.driver.name for link in await svc.list_drivers(store.id)] == ["Tom Hale"]
    assert await svc.unassign_driver(store.id, driver.id) is True
    assert await svc.unassign_driver(store.id, driver.id) is False
    assert await svc.list_drivers(store.id) == []


@pytest.mark.asyncio
async def test_delete_store_removes_dependent_records(session):
    store_svc = StoreService(session)
    store = await store_svc.create_store("Camden")
    other = await store_svc.create_store("Leeds")
    employee = await EmployeeService(session).create_employee("Aoife Byrne", hourly_rate_eur="15")
    driver = await DriverService(session).create_driver("Tom Hale")
    vendor = await VendorService(session).create_vendor("Musgrave")

    await store_svc.assign_employee(store.id, employee.id)
    await store_svc.assign_driver(store.id, driver.id)
    await SalesReconciler(session).reconcile_day(store.id, "EUR", date(2024, 3, 4), {"cash": 100}, 100)
    await SalesReconciler(session).reconcile_day(other.id, "EUR", date(2024, 3, 4), {"cash": 50}, 50)
    await ExpenseService(session).raise_expense(store.id, vendor.id, 500, "EUR")
    await AttendanceService(session).record_attendance(
        employee.id, store.id, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 12), "EUR"
    )
    await DeliveryLedger(session).record_delivery(
        driver.id, store.id, date(2024, 3, 4), datetime(2024, 3, 4, 17), datetime(2024, 3, 4, 20), 6, "EUR"
    )
    store_id = store.id

    await store_svc.delete_store(store_id)

    with pytest.raises(NotFoundError):
        await store_svc.get_by_id(store_id)
    assert await _count(session, Sale) == 1
    for model in (Expense, Attendance, Delivery, StoreEmployee, StoreDriver):
        assert await _count(session, model) == 0
    # people survive their store
    assert (await EmployeeService(session).get_by_id(employee.id)).name == "Aoife Byrne"


@pytest.mark.asyncio
async def test_gbp_store_without_default_gets_eur(session):
    store = await StoreService(session).create_store("Leeds", supported_currencies=["GBP"])

    assert store.supported_currencies == ["GBP", "EUR"]
    assert store.default_currency == Currency.EUR
