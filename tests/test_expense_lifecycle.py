import pytest
from datetime import date
from types import SimpleNamespace

from backoffice.core.enums import ExpenseStatus
from backoffice.core.exceptions import (
    AlreadyPaidError,
    EntityInUseError,
    InvalidAmountError,
    UnsupportedCurrencyError,
)
from backoffice.services.expense_lifecycle import ExpenseService, mark_paid
from backoffice.services.store_service import StoreService
from backoffice.services.vendor_service import VendorService


async def _setup(session):
    store = await StoreService(session).create_store("Camden", supported_currencies=["EUR"])
    vendor = await VendorService(session).create_vendor(
        "Musgrave", contact_name="Orders desk", email="orders@musgrave.ie"
    )
    return store, vendor


def test_mark_paid_moves_raised_to_paid():
    expense = SimpleNamespace(id=1, status=ExpenseStatus.RAISED)
    assert mark_paid(expense).status is ExpenseStatus.PAID


def test_mark_paid_twice_fails():
    expense = SimpleNamespace(id=7, status=ExpenseStatus.RAISED)
    mark_paid(expense)

    with pytest.raises(AlreadyPaidError) as exc:
        mark_paid(expense)
    assert exc.value.expense_id == 7
    assert expense.status is ExpenseStatus.PAID


@pytest.mark.asyncio
async def test_raise_expense_starts_raised(session):
    store, vendor = await _setup(session)
    svc = ExpenseService(session)

    expense = await svc.raise_expense(
        store.id, vendor.id, 12550, "EUR", date(2024, 3, 4), description="Weekly stock"
    )

    assert expense.status == ExpenseStatus.RAISED
    assert expense.amount == 12550
    assert expense.expense_date == date(2024, 3, 4)

    undated = await svc.raise_expense(store.id, vendor.id, 100, "EUR")
    assert undated.expense_date == date.today()


@pytest.mark.asyncio
async def test_raise_expense_validation(session):
    store, vendor = await _setup(session)
    svc = ExpenseService(session)

    with pytest.raises(UnsupportedCurrencyError):
        await svc.raise_expense(store.id, vendor.id, 100, "GBP")

    with pytest.raises(InvalidAmountError):
        await svc.raise_expense(store.id, vendor.id, -100, "EUR")

    assert await svc.list_expenses(store_id=store.id) == []


@pytest.mark.asyncio
async def test_settle_once(session):
    store, vendor = await _setup(session)
    svc = ExpenseService(session)
    expense = await svc.raise_expense(store.id, vendor.id, 5000, "EUR")

    paid = await svc.settle(expense.id)
    assert paid.status == ExpenseStatus.PAID

    with pytest.raises(AlreadyPaidError):
        await svc.settle(expense.id)

    again = await svc.settle(expense.id, idempotent=True)
    assert again.status == ExpenseStatus.PAID


@pytest.mark.asyncio
async def test_status_not_editable_through_update(session):
    store, vendor = await _setup(session)
    svc = ExpenseService(session)
    expense = await svc.raise_expense(store.id, vendor.id, 5000, "EUR")

    with pytest.raises(TypeError):
        await svc.update_expense(expense.id, status=ExpenseStatus.PAID)

    updated = await svc.update_expense(expense.id, amount=5200, description="corrected")
    assert updated.amount == 5200
    assert updated.status == ExpenseStatus.RAISED


@pytest.mark.asyncio
async def test_list_expenses_by_status(session):
    store, vendor = await _setup(session)
    svc = ExpenseService(session)
    first = await svc.raise_expense(store.id, vendor.id, 100, "EUR", date(2024, 3, 4))
    await svc.raise_expense(store.id, vendor.id, 200, "EUR", date(2024, 3, 5))
    await svc.settle(first.id)

    raised = await svc.list_expenses(status=ExpenseStatus.RAISED)
    assert [expense.amount for expense in raised] == [200]


@pytest.mark.asyncio
async def test_vendor_with_expenses_cannot_be_deleted(session):
    store, vendor = await _setup(session)
    await ExpenseService(session).raise_expense(store.id, vendor.id, 100, "EUR")

    with pytest.raises(EntityInUseError):
        await VendorService(session).delete_vendor(vendor.id)
