import datetime
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import Currency
from backoffice.core.exceptions import InvalidAmountError
from backoffice.models.delivery import Delivery
from backoffice.repositories.delivery_repository import DeliveryRepository
from backoffice.repositories.driver_repository import DriverRepository
from backoffice.repositories.store_repository import StoreRepository
from backoffice.services.currency_policy import validate_currency
from backoffice.services.wage_calculator import compute_hours
from backoffice.utils.date_utils import to_date, to_datetime
from backoffice.utils.validators import clean_optional, validate_minor_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryShift:
    check_in: datetime.datetime
    check_out: datetime.datetime
    hours_worked: Decimal
    number_of_deliveries: int
    expense_amount: int


def validate_delivery_count(value: Any) -> int:
    count = validate_minor_amount(value, "number_of_deliveries")
    if count < 1:
        raise InvalidAmountError("Invalid number_of_deliveries: must be a positive number")
    return count


def prepare_shift(
    check_in: datetime.datetime,
    check_out: datetime.datetime,
    number_of_deliveries: Any,
    expense_amount: Any,
) -> DeliveryShift:
    """
    Validates a driver shift and derives its hours.

    The delivery count and the expense amount are taken as given; drivers
    have no rate, so nothing else is computed.
    """
    return DeliveryShift(
        check_in=check_in,
        check_out=check_out,
        hours_worked=compute_hours(check_in, check_out),
        number_of_deliveries=validate_delivery_count(number_of_deliveries),
        expense_amount=validate_minor_amount(expense_amount, "expense_amount"),
    )


class DeliveryLedger:
    def __init__(self, session: AsyncSession):
        self.repo = DeliveryRepository(session)
        self.driver_repo = DriverRepository(session)
        self.store_repo = StoreRepository(session)

    async def record_delivery(
        self,
        driver_id: int,
        store_id: int,
        delivery_date: Union[datetime.date, str],
        check_in: Union[datetime.datetime, str],
        check_out: Union[datetime.datetime, str],
        number_of_deliveries: int,
        currency: Union[Currency, str],
        expense_amount: int = 0,
        notes: Optional[str] = None,
    ) -> Delivery:
        """
        Logs a driver's delivery shift.

        Raises:
            NotFoundError: Unknown driver or store
            UnsupportedCurrencyError: The store does not take the currency
            InvalidIntervalError: Check-out not after check-in
            InvalidAmountError: Bad delivery count or expense amount
        """
        await self.driver_repo.get_or_raise(driver_id)
        store = await self.store_repo.get_or_raise(store_id)
        currency = validate_currency(store, currency)
        shift = prepare_shift(
            to_datetime(check_in), to_datetime(check_out), number_of_deliveries, expense_amount
        )

        delivery = await self.repo.create(
            driver_id=driver_id,
            store_id=store_id,
            delivery_date=to_date(delivery_date),
            currency=currency,
            notes=clean_optional(notes),
            **asdict(shift),
        )
        logger.info(
            "Recorded delivery shift %s: driver %s, %s deliveries, %s h",
            delivery.id,
            driver_id,
            shift.number_of_deliveries,
            shift.hours_worked,
        )
        return delivery

    async def update_delivery(self, delivery_id: int, **changes: Any) -> Delivery:
        delivery = await self.repo.get_or_raise(delivery_id)

        driver_id = changes.pop("driver_id", delivery.driver_id)
        store_id = changes.pop("store_id", delivery.store_id)
        delivery_date = to_date(changes.pop("delivery_date", delivery.delivery_date))
        check_in = to_datetime(changes.pop("check_in", delivery.check_in))
        check_out = to_datetime(changes.pop("check_out", delivery.check_out))
        number_of_deliveries = changes.pop(
            "number_of_deliveries", delivery.number_of_deliveries
        )
        expense_amount = changes.pop("expense_amount", delivery.expense_amount)
        currency = changes.pop("currency", delivery.currency)
        notes = clean_optional(changes.pop("notes", delivery.notes))

        if changes:
            raise TypeError(f"Unknown delivery fields: {sorted(changes)}")

        await self.driver_repo.get_or_raise(driver_id)
        store = await self.store_repo.get_or_raise(store_id)
        currency = validate_currency(store, currency)
        shift = prepare_shift(check_in, check_out, number_of_deliveries, expense_amount)

        logger.info("Updating delivery shift %s", delivery_id)
        return await self.repo.update(
            delivery,
            driver_id=driver_id,
            store_id=store_id,
            delivery_date=delivery_date,
            currency=currency,
            notes=notes,
            **asdict(shift),
        )

    async def list_deliveries(
        self,
        driver_id: Optional[int] = None,
        store_id: Optional[int] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Delivery]:
        return await self.repo.list(
            driver_id=driver_id, store_id=store_id, start_date=start_date, end_date=end_date
        )

    async def delete_delivery(self, delivery_id: int) -> None:
        delivery = await self.repo.get_or_raise(delivery_id)
        await self.repo.delete(delivery)
