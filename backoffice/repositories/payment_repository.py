import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.future import select
from backoffice.core.enums import Currency
from backoffice.models.payment import Payment
from backoffice.repositories.base import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    model = Payment

    async def list(
        self,
        employee_id: Optional[int] = None,
        currency: Optional[Currency] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Payment]:
        query = select(Payment)
        if employee_id is not None:
            query = query.where(Payment.employee_id == employee_id)
        if currency is not None:
            query = query.where(Payment.currency == currency)
        if start_date is not None:
            query = query.where(Payment.paid_date >= start_date)
        if end_date is not None:
            query = query.where(Payment.paid_date <= end_date)
        result = await self.session.execute(query.order_by(Payment.paid_date.desc()))
        return result.scalars().all()

    async def get_sum_for_period(
        self,
        employee_id: int,
        currency: Currency,
        start_date: datetime.date,
        end_date: datetime.date,
    ) -> int:
        """Total paid to the employee in the currency, both dates inclusive"""
        result = await self.session.execute(
            select(func.sum(Payment.amount_paid)).where(
                Payment.employee_id == employee_id,
                Payment.currency == currency,
                Payment.paid_date >= start_date,
                Payment.paid_date <= end_date,
            )
        )
        return result.scalar() or 0
