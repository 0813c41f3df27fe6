import datetime
import logging
from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, List, Optional
import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import ExpenseStatus, WageType
from backoffice.repositories.attendance_repository import AttendanceRepository
from backoffice.repositories.delivery_repository import DeliveryRepository
from backoffice.repositories.expense_repository import ExpenseRepository
from backoffice.repositories.sale_repository import SaleRepository
from backoffice.services.payroll_aggregator import compute_earned
from backoffice.utils.date_utils import period_bounds

logger = logging.getLogger(__name__)


def _sum_by(df: pd.DataFrame, by, column: str) -> Dict[Any, int]:
    if df.empty:
        return {}
    grouped = df.groupby(by)[column].sum()
    return {key: int(value) for key, value in grouped.items()}


class ReportService:
    """Period statistics per currency. Amounts are minor units, never converted."""

    def __init__(self, session: AsyncSession):
        self.sale_repo = SaleRepository(session)
        self.attendance_repo = AttendanceRepository(session)
        self.expense_repo = ExpenseRepository(session)
        self.delivery_repo = DeliveryRepository(session)

    async def period_report(
        self,
        start_date: datetime.date,
        end_date: datetime.date,
        store_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Collects sales, payroll, hours, expenses and deliveries for the period.

        Args:
            start_date: First day, inclusive
            end_date: Last day, inclusive
            store_id: Limit to one store

        A FIXED weekly wage is counted once per employee and ISO week among
        the rows the report covers. Filtered by store, every store the
        employee worked at that week shows the full wage, so per-store
        payroll figures can add up to more than the all-stores report.

        Returns:
            Dict[str, Any]: {
                "sales": {currency: total},
                "sales_by_store": {store name: {currency: total}},
                "cash_difference": {currency: signed till difference},
                "payroll": {currency: earned},
                "hours": Decimal,
                "expenses": {currency: {"paid", "pending", "total"}},
                "deliveries": {"shifts", "count", "expenses": {currency: amount}},
            }
        """
        start, end = period_bounds(start_date, end_date)

        sales = await self.sale_repo.list(
            store_id=store_id, start_date=start_date, end_date=end_date
        )
        attendance = await self.attendance_repo.list(store_id=store_id, start=start, end=end)
        expenses = await self.expense_repo.list(
            store_id=store_id, start_date=start_date, end_date=end_date
        )
        deliveries = await self.delivery_repo.list(
            store_id=store_id, start_date=start_date, end_date=end_date
        )

        report = {
            **self._sales_section(sales),
            "payroll": self._payroll_section(attendance),
            "hours": sum(
                (Decimal(str(record.hours_worked)) for record in attendance), Decimal("0")
            ),
            "expenses": self._expenses_section(expenses),
            "deliveries": self._deliveries_section(deliveries),
        }
        logger.info(
            "Report %s..%s (store %s): %s sales, %s attendance, %s expenses, %s deliveries",
            start_date,
            end_date,
            store_id if store_id is not None else "all",
            len(sales),
            len(attendance),
            len(expenses),
            len(deliveries),
        )
        return report

    def _sales_section(self, sales: List) -> Dict[str, Any]:
        df = pd.DataFrame(
            [
                {
                    "store": sale.store.name,
                    "currency": sale.currency.value,
                    "total": sale.total,
                    "difference": sale.difference,
                }
                for sale in sales
            ],
            columns=["store", "currency", "total", "difference"],
        )

        by_store: Dict[str, Dict[str, int]] = defaultdict(dict)
        for (store, currency), total in _sum_by(df, ["store", "currency"], "total").items():
            by_store[store][currency] = total

        return {
            "sales": _sum_by(df, "currency", "total"),
            "sales_by_store": dict(by_store),
            "cash_difference": _sum_by(df, "currency", "difference"),
        }

    def _payroll_section(self, attendance: List) -> Dict[str, int]:
        groups = defaultdict(list)
        for record in attendance:
            groups[(record.employee_id, record.currency.value)].append(record)

        payroll: Dict[str, int] = defaultdict(int)
        for (employee_id, currency), records in groups.items():
            default_wage_type = records[0].employee.wage_type or WageType.HOURLY
            payroll[currency] += compute_earned(records, default_wage_type)
        return dict(payroll)

    def _expenses_section(self, expenses: List) -> Dict[str, Dict[str, int]]:
        df = pd.DataFrame(
            [
                {
                    "currency": expense.currency.value,
                    "status": expense.status.value,
                    "amount": expense.amount,
                }
                for expense in expenses
            ],
            columns=["currency", "status", "amount"],
        )
        if df.empty:
            return {}

        table = df.pivot_table(
            index="currency", columns="status", values="amount", aggfunc="sum", fill_value=0
        )
        section = {}
        for currency, row in table.iterrows():
            paid = int(row.get(ExpenseStatus.PAID.value, 0))
            pending = int(row.get(ExpenseStatus.RAISED.value, 0))
            section[currency] = {"paid": paid, "pending": pending, "total": paid + pending}
        return section

    def _deliveries_section(self, deliveries: List) -> Dict[str, Any]:
        df = pd.DataFrame(
            [
                {
                    "currency": delivery.currency.value,
                    "count": delivery.number_of_deliveries,
                    "expense": delivery.expense_amount,
                }
                for delivery in deliveries
            ],
            columns=["currency", "count", "expense"],
        )
        return {
            "shifts": len(df),
            "count": int(df["count"].sum()) if not df.empty else 0,
            "expenses": _sum_by(df, "currency", "expense"),
        }
