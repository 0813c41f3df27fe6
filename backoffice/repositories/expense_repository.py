import datetime
from typing import List, Optional
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from backoffice.core.enums import Currency, ExpenseStatus
from backoffice.models.expense import Expense
from backoffice.repositories.base import BaseRepository


class ExpenseRepository(BaseRepository[Expense]):
    model = Expense

    async def list(
        self,
        store_id: Optional[int] = None,
        vendor_id: Optional[int] = None,
        currency: Optional[Currency] = None,
        status: Optional[ExpenseStatus] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Expense]:
        query = select(Expense).options(
            selectinload(Expense.store), selectinload(Expense.vendor)
        )
        if store_id is not None:
            query = query.where(Expense.store_id == store_id)
        if vendor_id is not None:
            query = query.where(Expense.vendor_id == vendor_id)
        if currency is not None:
            query = query.where(Expense.currency == currency)
        if status is not None:
            query = query.where(Expense.status == status)
        if start_date is not None:
            query = query.where(Expense.expense_date >= start_date)
        if end_date is not None:
            query = query.where(Expense.expense_date <= end_date)
        result = await self.session.execute(
            query.order_by(Expense.expense_date.desc())
        )
        return result.scalars().all()
