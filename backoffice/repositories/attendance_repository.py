import datetime
from typing import List, Optional
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from backoffice.core.enums import Currency
from backoffice.models.attendance import Attendance
from backoffice.repositories.base import BaseRepository


class AttendanceRepository(BaseRepository[Attendance]):
    model = Attendance

    async def list(
        self,
        employee_id: Optional[int] = None,
        store_id: Optional[int] = None,
        currency: Optional[Currency] = None,
        start: Optional[datetime.datetime] = None,
        end: Optional[datetime.datetime] = None,
    ) -> List[Attendance]:
        """
        Attendance records filtered by employee, store and currency.

        `start` is inclusive and `end` exclusive; both bound `check_in`.
        """
        query = select(Attendance).options(
            selectinload(Attendance.employee), selectinload(Attendance.store)
        )
        if employee_id is not None:
            query = query.where(Attendance.employee_id == employee_id)
        if store_id is not None:
            query = query.where(Attendance.store_id == store_id)
        if currency is not None:
            query = query.where(Attendance.currency == currency)
        if start is not None:
            query = query.where(Attendance.check_in >= start)
        if end is not None:
            query = query.where(Attendance.check_in < end)
        result = await self.session.execute(query.order_by(Attendance.check_in.desc()))
        return result.scalars().all()
