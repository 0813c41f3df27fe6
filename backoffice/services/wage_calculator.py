"""
Hours and pay of a single attendance record.

Rates are stored in major units (15.00 per hour), amounts to pay in minor
units (cents/pence). Hours are rounded half-up to two decimals first, pay is
then rounded half-up to the whole minor unit.
"""

import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union
from backoffice.core.enums import Currency, WageType
from backoffice.core.exceptions import InvalidIntervalError, MissingRateError
from backoffice.models.employee import Employee
from backoffice.utils.validators import MINOR_UNITS, round_half_up

HOURS_PRECISION = Decimal("0.01")
SECONDS_PER_HOUR = Decimal(3600)


def compute_hours(
    check_in: datetime.datetime, check_out: datetime.datetime
) -> Decimal:
    """
    Length of the shift in hours, rounded half-up to 0.01.

    Raises:
        InvalidIntervalError: If check_out is not after check_in
    """
    if check_out <= check_in:
        raise InvalidIntervalError(
            f"Check-out time {check_out.isoformat()} must be after check-in time {check_in.isoformat()}"
        )

    seconds = Decimal(str((check_out - check_in).total_seconds()))
    return (seconds / SECONDS_PER_HOUR).quantize(HOURS_PRECISION, rounding=ROUND_HALF_UP)


def hourly_rate(employee: Employee, currency: Currency) -> Optional[Decimal]:
    if currency is Currency.EUR:
        return employee.hourly_rate_eur
    if currency is Currency.GBP:
        return employee.hourly_rate_gbp
    raise ValueError(f"Unhandled currency {currency}")


def weekly_wage(employee: Employee, currency: Currency) -> Optional[Decimal]:
    if currency is Currency.EUR:
        return employee.weekly_wage_eur
    if currency is Currency.GBP:
        return employee.weekly_wage_gbp
    raise ValueError(f"Unhandled currency {currency}")


def compute_amount_to_pay(
    employee: Employee, currency: Currency, hours_worked: Union[Decimal, int, str]
) -> int:
    """
    Pay for one attendance record, in minor units.

    HOURLY employees earn hours × hourly rate. FIXED employees get their
    weekly wage on every record regardless of hours; PayrollAggregator counts
    it once per ISO week.

    Raises:
        MissingRateError: If no rate is configured for the wage type and currency
    """
    wage_type = WageType(employee.wage_type)
    currency = Currency(currency)

    if wage_type is WageType.HOURLY:
        rate = hourly_rate(employee, currency)
        if not rate:
            raise MissingRateError(employee.name, wage_type, currency)
        return round_half_up(Decimal(str(hours_worked)) * Decimal(str(rate)) * MINOR_UNITS)

    if wage_type is WageType.FIXED:
        wage = weekly_wage(employee, currency)
        if not wage:
            raise MissingRateError(employee.name, wage_type, currency)
        return round_half_up(Decimal(str(wage)) * MINOR_UNITS)

    raise ValueError(f"Unhandled wage type {wage_type}")
