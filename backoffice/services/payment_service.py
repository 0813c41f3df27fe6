import datetime
import logging
from typing import Any, List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import Currency, PaymentMethod
from backoffice.core.exceptions import InvalidAmountError
from backoffice.models.payment import Payment
from backoffice.repositories.assignment_repository import StoreEmployeeRepository
from backoffice.repositories.employee_repository import EmployeeRepository
from backoffice.repositories.payment_repository import PaymentRepository
from backoffice.repositories.store_repository import StoreRepository
from backoffice.services.currency_policy import (
    parse_currency,
    validate_any_store_currency,
    validate_currency,
)
from backoffice.utils.date_utils import to_date
from backoffice.utils.validators import clean_optional, validate_minor_amount

logger = logging.getLogger(__name__)


def parse_payment_method(value: Union[PaymentMethod, str]) -> PaymentMethod:
    if isinstance(value, PaymentMethod):
        return value
    try:
        return PaymentMethod(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Invalid payment method: {value}. Use CASH or ACCOUNT.")


def validate_amount_paid(value: Any) -> int:
    amount = validate_minor_amount(value, "amount_paid")
    if amount == 0:
        raise InvalidAmountError("Invalid amount_paid: must be greater than 0")
    return amount


class PaymentService:
    def __init__(self, session: AsyncSession):
        self.repo = PaymentRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.store_repo = StoreRepository(session)
        self.store_employee_repo = StoreEmployeeRepository(session)

    async def _check_currency(
        self,
        employee_id: int,
        currency: Union[Currency, str],
        store_id: Optional[int],
    ) -> Currency:
        """
        Payments belong to no store. The currency is checked against
        `store_id` when given, otherwise against the stores the employee is
        assigned to.
        """
        if store_id is not None:
            store = await self.store_repo.get_or_raise(store_id)
            return validate_currency(store, currency)

        store_ids = await self.store_employee_repo.get_store_ids(employee_id)
        stores = await self.store_repo.get_by_ids(store_ids)
        return validate_any_store_currency(stores, currency)

    async def record_payment(
        self,
        employee_id: int,
        amount_paid: int,
        currency: Union[Currency, str],
        payment_method: Union[PaymentMethod, str],
        paid_date: Union[datetime.date, str],
        notes: Optional[str] = None,
        store_id: Optional[int] = None,
    ) -> Payment:
        """
        Records a payment made to an employee.

        Raises:
            NotFoundError: Unknown employee or store
            InvalidAmountError: Amount is not a positive integer
            UnsupportedCurrencyError: No relevant store takes the currency
        """
        await self.employee_repo.get_or_raise(employee_id)
        amount_paid = validate_amount_paid(amount_paid)
        currency = await self._check_currency(employee_id, currency, store_id)

        payment = await self.repo.create(
            employee_id=employee_id,
            amount_paid=amount_paid,
            currency=currency,
            payment_method=parse_payment_method(payment_method),
            paid_date=to_date(paid_date),
            notes=clean_optional(notes),
        )
        logger.info(
            "Recorded payment %s to employee %s: %s %s (%s)",
            payment.id,
            employee_id,
            amount_paid,
            currency.value,
            payment.payment_method.value,
        )
        return payment

    async def update_payment(
        self, payment_id: int, store_id: Optional[int] = None, **changes: Any
    ) -> Payment:
        """
        Corrects amount, currency, method, date or notes of a payment.

        The merged record goes through the same checks as record_payment;
        `store_id` only selects the store the currency is checked against.
        """
        payment = await self.repo.get_or_raise(payment_id)

        amount_paid = changes.pop("amount_paid", payment.amount_paid)
        currency = changes.pop("currency", payment.currency)
        payment_method = changes.pop("payment_method", payment.payment_method)
        paid_date = changes.pop("paid_date", payment.paid_date)
        notes = clean_optional(changes.pop("notes", payment.notes))

        if changes:
            raise TypeError(f"Unknown payment fields: {sorted(changes)}")

        fields = dict(
            amount_paid=validate_amount_paid(amount_paid),
            currency=await self._check_currency(payment.employee_id, currency, store_id),
            payment_method=parse_payment_method(payment_method),
            paid_date=to_date(paid_date),
            notes=notes,
        )
        logger.info("Updating payment %s", payment_id)
        return await self.repo.update(payment, **fields)

    async def list_payments(
        self,
        employee_id: Optional[int] = None,
        currency: Optional[Union[Currency, str]] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Payment]:
        return await self.repo.list(
            employee_id=employee_id,
            currency=parse_currency(currency) if currency else None,
            start_date=start_date,
            end_date=end_date,
        )

    async def delete_payment(self, payment_id: int) -> None:
        payment = await self.repo.get_or_raise(payment_id)
        await self.repo.delete(payment)
