import pytest
from datetime import date, datetime
from decimal import Decimal

from backoffice.services.attendance_service import AttendanceService
from backoffice.services.delivery_ledger import DeliveryLedger
from backoffice.services.driver_service import DriverService
from backoffice.services.employee_service import EmployeeService
from backoffice.services.expense_lifecycle import ExpenseService
from backoffice.services.report_service import ReportService
from backoffice.services.sales_reconciler import SalesReconciler
from backoffice.services.store_service import StoreService
from backoffice.services.vendor_service import VendorService

START = date(2024, 3, 4)
END = date(2024, 3, 10)


@pytest.mark.asyncio
async def test_empty_period_report(session):
    report = await ReportService(session).period_report(START, END)

    assert report["sales"] == {}
    assert report["payroll"] == {}
    assert report["hours"] == Decimal("0")
    assert report["expenses"] == {}
    assert report["deliveries"] == {"shifts": 0, "count": 0, "expenses": {}}


@pytest.mark.asyncio
async def test_period_report_totals_per_currency(session):
    store_svc = StoreService(session)
    belfast = await store_svc.create_store("Belfast", supported_currencies=["EUR", "GBP"])
    camden = await store_svc.create_store("Camden")
    hourly = await EmployeeService(session).create_employee("Niamh Kelly", hourly_rate_gbp="12")
    fixed = await EmployeeService(session).create_employee(
        "Sean Walsh", wage_type="FIXED", weekly_wage_eur="500"
    )
    driver = await DriverService(session).create_driver("Tom Hale")
    vendor = await VendorService(session).create_vendor("Musgrave")

    sales = SalesReconciler(session)
    await sales.reconcile_day(belfast.id, "EUR", date(2024, 3, 4), {"cash": 1000, "online": 500}, 990)
    await sales.reconcile_day(belfast.id, "GBP", date(2024, 3, 4), {"cash": 300}, 300)
    await sales.reconcile_day(camden.id, "EUR", date(2024, 3, 5), {"cash": 200}, 205)
    # outside the period
    await sales.reconcile_day(camden.id, "EUR", date(2024, 3, 11), {"cash": 999}, 999)

    attendance = AttendanceService(session)
    await attendance.record_attendance(
        hourly.id, belfast.id, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 13), "GBP"
    )
    await attendance.record_attendance(
        fixed.id, camden.id, datetime(2024, 3, 5, 9), datetime(2024, 3, 5, 17), "EUR"
    )
    await attendance.record_attendance(
        fixed.id, camden.id, datetime(2024, 3, 6, 9), datetime(2024, 3, 6, 17), "EUR"
    )

    expenses = ExpenseService(session)
    paid = await expenses.raise_expense(belfast.id, vendor.id, 4000, "EUR", date(2024, 3, 6))
    await expenses.settle(paid.id)
    await expenses.raise_expense(camden.id, vendor.id, 1500, "EUR", date(2024, 3, 7))
    await expenses.raise_expense(belfast.id, vendor.id, 700, "GBP", date(2024, 3, 7))

    await DeliveryLedger(session).record_delivery(
        driver.id, belfast.id, date(2024, 3, 8), datetime(2024, 3, 8, 17),
        datetime(2024, 3, 8, 21), 9, "GBP", expense_amount=1200,
    )

    report = await ReportService(session).period_report(START, END)

    assert report["sales"] == {"EUR": 1700, "GBP": 300}
    assert report["sales_by_store"] == {
        "Belfast": {"EUR": 1500, "GBP": 300},
        "Camden": {"EUR": 200},
    }
    assert report["cash_difference"] == {"EUR": -5, "GBP": 0}
    assert report["payroll"] == {"GBP": 4800, "EUR": 50000}
    assert report["hours"] == Decimal("20.00")
    assert report["expenses"] == {
        "EUR": {"paid": 4000, "pending": 1500, "total": 5500},
        "GBP": {"paid": 0, "pending": 700, "total": 700},
    }
    assert report["deliveries"] == {"shifts": 1, "count": 9, "expenses": {"GBP": 1200}}


@pytest.mark.asyncio
async def test_report_for_one_store(session):
    store_svc = StoreService(session)
    belfast = await store_svc.create_store("Belfast")
    camden = await store_svc.create_store("Camden")
    sales = SalesReconciler(session)
    await sales.reconcile_day(belfast.id, "EUR", date(2024, 3, 4), {"cash": 100}, 100)
    await sales.reconcile_day(camden.id, "EUR", date(2024, 3, 4), {"cash": 200}, 200)

    report = await ReportService(session).period_report(START, END, store_id=camden.id)

    assert report["sales"] == {"EUR": 200}
    assert list(report["sales_by_store"]) == ["Camden"]


@pytest.mark.asyncio
async def test_fixed_wage_attributed_to_each_store_worked(session):
    store_svc = StoreService(session)
    belfast = await store_svc.create_store("Belfast")
    camden = await store_svc.create_store("Camden")
    fixed = await EmployeeService(session).create_employee(
        "Sean Walsh", wage_type="FIXED", weekly_wage_eur="500"
    )
    attendance = AttendanceService(session)
    await attendance.record_attendance(
        fixed.id, belfast.id, datetime(2024, 3, 4, 9), datetime(2024, 3, 4, 17), "EUR"
    )
    await attendance.record_attendance(
        fixed.id, camden.id, datetime(2024, 3, 6, 9), datetime(2024, 3, 6, 17), "EUR"
    )

    svc = ReportService(session)
    overall = await svc.period_report(START, END)
    per_belfast = await svc.period_report(START, END, store_id=belfast.id)
    per_camden = await svc.period_report(START, END, store_id=camden.id)

    assert overall["payroll"] == {"EUR": 50000}
    assert per_belfast["payroll"] == {"EUR": 50000}
    assert per_camden["payroll"] == {"EUR": 50000}
