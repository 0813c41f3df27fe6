import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple, Union
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import Currency, WageType
from backoffice.models.attendance import Attendance
from backoffice.repositories.attendance_repository import AttendanceRepository
from backoffice.repositories.employee_repository import EmployeeRepository
from backoffice.repositories.payment_repository import PaymentRepository
from backoffice.services.currency_policy import parse_currency
from backoffice.utils.date_utils import iso_week_key, period_bounds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PayrollSummary:
    employee_id: int
    currency: Currency
    period_start: datetime.date
    period_end: datetime.date
    earned: int
    paid: int
    balance: int
    hours_worked: Decimal = Decimal("0")


def compute_earned(
    records: Iterable[Attendance], default_wage_type: WageType = WageType.HOURLY
) -> int:
    """
    Sums amount_to_pay over attendance records of one employee and currency.

    Every FIXED-wage record carries the full weekly wage, so FIXED records
    are grouped by ISO week and each week is counted once, with the amount
    of its earliest check-in. HOURLY records are summed as they are.
    Records without a wage type snapshot use `default_wage_type`.
    """
    earned = 0
    fixed_weeks: Dict[Tuple[int, int], Attendance] = {}

    for record in records:
        wage_type = WageType(record.wage_type or default_wage_type)
        if wage_type is WageType.HOURLY:
            earned += record.amount_to_pay
        elif wage_type is WageType.FIXED:
            week = iso_week_key(record.check_in)
            first = fixed_weeks.get(week)
            if first is None or record.check_in < first.check_in:
                fixed_weeks[week] = record
        else:
            raise ValueError(f"Unhandled wage type {wage_type}")

    return earned + sum(record.amount_to_pay for record in fixed_weeks.values())


class PayrollAggregator:
    """Read-only payroll summaries over attendance and payment history"""

    def __init__(self, session: AsyncSession):
        self.attendance_repo = AttendanceRepository(session)
        self.payment_repo = PaymentRepository(session)
        self.employee_repo = EmployeeRepository(session)

    async def summarize(
        self,
        employee_id: int,
        currency: Union[Currency, str],
        period_start: datetime.date,
        period_end: datetime.date,
    ) -> PayrollSummary:
        """
        Earned, paid and outstanding balance of an employee in one currency.

        Both period dates are inclusive. Attendance counts by check-in time,
        payments by paid date.

        Raises:
            NotFoundError: Unknown employee
        """
        employee = await self.employee_repo.get_or_raise(employee_id)
        currency = parse_currency(currency)
        start, end = period_bounds(period_start, period_end)

        records = await self.attendance_repo.list(
            employee_id=employee_id, currency=currency, start=start, end=end
        )
        earned = compute_earned(records, employee.wage_type)
        paid = await self.payment_repo.get_sum_for_period(
            employee_id, currency, period_start, period_end
        )
        hours = sum((Decimal(str(record.hours_worked)) for record in records), Decimal("0"))

        return PayrollSummary(
            employee_id=employee_id,
            currency=currency,
            period_start=period_start,
            period_end=period_end,
            earned=earned,
            paid=paid,
            balance=earned - paid,
            hours_worked=hours,
        )

    async def run_payroll(
        self,
        period_start: datetime.date,
        period_end: datetime.date,
        employee_ids: Optional[List[int]] = None,
    ) -> List[PayrollSummary]:
        """
        Summaries for every employee and every currency in which they worked
        or were paid during the period.
        """
        start, end = period_bounds(period_start, period_end)
        if employee_ids is None:
            employee_ids = [employee.id for employee in await self.employee_repo.get_all()]

        summaries = []
        for employee_id in employee_ids:
            records = await self.attendance_repo.list(
                employee_id=employee_id, start=start, end=end
            )
            payments = await self.payment_repo.list(
                employee_id=employee_id, start_date=period_start, end_date=period_end
            )
            currencies = {Currency(record.currency) for record in records}
            currencies.update(Currency(payment.currency) for payment in payments)

            for currency in sorted(currencies, key=lambda c: c.value):
                summaries.append(
                    await self.summarize(employee_id, currency, period_start, period_end)
                )

        logger.info(
            "Payroll run %s..%s: %s summaries for %s employees",
            period_start,
            period_end,
            len(summaries),
            len(employee_ids),
        )
        return summaries
