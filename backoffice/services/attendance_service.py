import datetime
import logging
from typing import Any, List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import Currency
from backoffice.models.attendance import Attendance
from backoffice.repositories.attendance_repository import AttendanceRepository
from backoffice.repositories.employee_repository import EmployeeRepository
from backoffice.repositories.store_repository import StoreRepository
from backoffice.services.currency_policy import parse_currency, validate_currency
from backoffice.services.wage_calculator import compute_amount_to_pay, compute_hours
from backoffice.utils.date_utils import period_bounds, to_datetime
from backoffice.utils.validators import clean_optional

logger = logging.getLogger(__name__)


class AttendanceService:
    """
    Attendance records. Hours and pay are always computed here from the
    check-in/check-out pair and the employee's current wage configuration.
    """

    def __init__(self, session: AsyncSession):
        self.repo = AttendanceRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.store_repo = StoreRepository(session)

    async def _compute(
        self,
        employee_id: int,
        store_id: int,
        check_in: datetime.datetime,
        check_out: datetime.datetime,
        currency: Union[Currency, str],
    ) -> dict:
        employee = await self.employee_repo.get_or_raise(employee_id)
        store = await self.store_repo.get_or_raise(store_id)
        currency = validate_currency(store, currency)

        hours_worked = compute_hours(check_in, check_out)
        amount_to_pay = compute_amount_to_pay(employee, currency, hours_worked)

        return {
            "employee_id": employee_id,
            "store_id": store_id,
            "check_in": check_in,
            "check_out": check_out,
            "currency": currency,
            "hours_worked": hours_worked,
            "amount_to_pay": amount_to_pay,
            "wage_type": employee.wage_type,
        }

    async def record_attendance(
        self,
        employee_id: int,
        store_id: int,
        check_in: Union[datetime.datetime, str],
        check_out: Union[datetime.datetime, str],
        currency: Union[Currency, str],
        notes: Optional[str] = None,
    ) -> Attendance:
        """
        Records a worked shift.

        Raises:
            NotFoundError: Unknown employee or store
            UnsupportedCurrencyError: The store does not take the currency
            InvalidIntervalError: Check-out not after check-in
            MissingRateError: The employee has no rate for the currency
        """
        data = await self._compute(
            employee_id, store_id, to_datetime(check_in), to_datetime(check_out), currency
        )
        attendance = await self.repo.create(notes=clean_optional(notes), **data)
        logger.info(
            "Recorded attendance %s: employee %s, %s h, %s %s",
            attendance.id,
            employee_id,
            data["hours_worked"],
            data["amount_to_pay"],
            data["currency"].value,
        )
        return attendance

    async def update_attendance(self, attendance_id: int, **changes: Any) -> Attendance:
        """Applies changes and recomputes hours and pay from the merged record"""
        attendance = await self.repo.get_or_raise(attendance_id)

        employee_id = changes.pop("employee_id", attendance.employee_id)
        store_id = changes.pop("store_id", attendance.store_id)
        check_in = to_datetime(changes.pop("check_in", attendance.check_in))
        check_out = to_datetime(changes.pop("check_out", attendance.check_out))
        currency = changes.pop("currency", attendance.currency)
        notes = clean_optional(changes.pop("notes", attendance.notes))

        if changes:
            raise TypeError(f"Unknown attendance fields: {sorted(changes)}")

        data = await self._compute(employee_id, store_id, check_in, check_out, currency)
        logger.info("Updating attendance %s", attendance_id)
        return await self.repo.update(attendance, notes=notes, **data)

    async def list_attendance(
        self,
        employee_id: Optional[int] = None,
        store_id: Optional[int] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
        currency: Optional[Union[Currency, str]] = None,
    ) -> List[Attendance]:
        """Records whose check-in falls on a day between start_date and end_date inclusive"""
        start = end = None
        if start_date and end_date:
            start, end = period_bounds(start_date, end_date)
        elif start_date:
            start, _ = period_bounds(start_date, start_date)
        elif end_date:
            _, end = period_bounds(end_date, end_date)

        return await self.repo.list(
            employee_id=employee_id,
            store_id=store_id,
            currency=parse_currency(currency) if currency else None,
            start=start,
            end=end,
        )

    async def delete_attendance(self, attendance_id: int) -> None:
        attendance = await self.repo.get_or_raise(attendance_id)
        await self.repo.delete(attendance)
