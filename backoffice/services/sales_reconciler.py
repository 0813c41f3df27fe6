import datetime
import logging
from collections import defaultdict
from dataclasses import dataclass, fields as dataclass_fields
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import Currency
from backoffice.core.exceptions import UniqueConstraintConflict
from backoffice.models.sale import Sale, CHANNEL_FIELDS
from backoffice.repositories.sale_repository import SaleRepository
from backoffice.repositories.store_repository import StoreRepository
from backoffice.services.currency_policy import parse_currency, validate_currency
from backoffice.utils.date_utils import to_date
from backoffice.utils.validators import clean_optional, validate_minor_amount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SalesChannels:
    """One day's takings per sales channel, in minor units"""

    cash: int = 0
    online: int = 0
    delivery: int = 0
    just_eat: int = 0
    mylocal: int = 0
    credit_card: int = 0
    deliveroo: int = 0
    uber_eats: int = 0

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SalesChannels":
        """
        Validates raw channel values; missing or empty channels count as 0.

        Raises:
            InvalidAmountError: If a channel is negative, fractional or not finite
            TypeError: If an unknown channel is given
        """
        unknown = set(values) - set(CHANNEL_FIELDS)
        if unknown:
            raise TypeError(f"Unknown sales channels: {sorted(unknown)}")
        return cls(
            **{
                name: validate_minor_amount(values.get(name), name, default=0)
                for name in CHANNEL_FIELDS
            }
        )

    @classmethod
    def from_sale(cls, sale: Sale) -> "SalesChannels":
        return cls(**{name: getattr(sale, name) for name in CHANNEL_FIELDS})

    def as_dict(self) -> Dict[str, int]:
        return {field.name: getattr(self, field.name) for field in dataclass_fields(self)}


@dataclass(frozen=True)
class Reconciliation:
    total: int
    difference: int


def reconcile(
    channels: Union[SalesChannels, Mapping[str, Any]], cash_in_till: Any
) -> Reconciliation:
    """
    Reconciles a day's sales against the counted till.

    `total` is the sum of every channel. `difference` compares the till with
    the cash channel only, the other channels never reach the till: negative
    means the till is short, positive means it is over.

    Raises:
        InvalidAmountError: On a negative or non-finite channel or till amount
    """
    if not isinstance(channels, SalesChannels):
        channels = SalesChannels.from_mapping(channels)
    else:
        # re-validate values set directly on the dataclass
        channels = SalesChannels.from_mapping(channels.as_dict())

    till = validate_minor_amount(cash_in_till, "cash_in_till", default=0)
    total = sum(channels.as_dict().values())
    return Reconciliation(total=total, difference=till - channels.cash)


class SalesReconciler:
    """
    Persists reconciled sales, one row per (store, currency, date).

    This is the only write path for Sale.total and Sale.difference.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = SaleRepository(session)
        self.store_repo = StoreRepository(session)

    async def reconcile_day(
        self,
        store_id: int,
        currency: Union[Currency, str],
        date_: Union[datetime.date, str],
        channels: Union[SalesChannels, Mapping[str, Any]],
        cash_in_till: Any = 0,
        notes: Optional[str] = None,
    ) -> Sale:
        """
        Records the day's sales for a store and currency.

        A second call for the same day corrects the existing record instead of
        creating another one. When a concurrent writer inserts the same key
        between our lookup and insert, the insert is retried as an update.

        Returns:
            Sale: The created or updated record
        """
        store = await self.store_repo.get_or_raise(store_id)
        currency = validate_currency(store, currency)
        date_ = to_date(date_)

        if not isinstance(channels, SalesChannels):
            channels = SalesChannels.from_mapping(channels)
        result = reconcile(channels, cash_in_till)
        data = dict(
            channels.as_dict(),
            total=result.total,
            cash_in_till=validate_minor_amount(cash_in_till, "cash_in_till", default=0),
            difference=result.difference,
            notes=clean_optional(notes),
        )

        existing = await self.repo.get_by_key(store_id, currency, date_)
        if existing:
            logger.info(
                "Correcting sales of store %s for %s %s: total=%s difference=%s",
                store_id,
                date_,
                currency.value,
                result.total,
                result.difference,
            )
            return await self.repo.update(existing, **data)

        try:
            sale = await self.repo.create(
                store_id=store_id, currency=currency, date=date_, **data
            )
        except UniqueConstraintConflict:
            logger.warning(
                "Sales of store %s for %s %s were recorded concurrently, updating",
                store_id,
                date_,
                currency.value,
            )
            existing = await self.repo.get_by_key(store_id, currency, date_)
            if existing is None:
                logger.error(
                    "Conflicting sale of store %s for %s %s is gone, giving up",
                    store_id,
                    date_,
                    currency.value,
                )
                raise
            return await self.repo.update(existing, **data)

        logger.info(
            "Recorded sales of store %s for %s %s: total=%s difference=%s",
            store_id,
            date_,
            currency.value,
            result.total,
            result.difference,
        )
        return sale

    async def update_sale(self, sale_id: int, **changes: Any) -> Sale:
        """
        Corrects an existing sale.

        Channel values and the till count are merged over the stored ones and
        reconciled again; moving the sale to another store or currency
        re-checks that the store supports the currency.
        """
        sale = await self.repo.get_or_raise(sale_id)

        store_id = changes.pop("store_id", sale.store_id)
        currency = changes.pop("currency", sale.currency)
        date_ = changes.pop("date", sale.date)
        if store_id is None or currency is None or date_ is None:
            raise ValueError("Sale store, currency and date cannot be cleared")
        if store_id != sale.store_id or parse_currency(currency) != sale.currency:
            store = await self.store_repo.get_or_raise(store_id)
            currency = validate_currency(store, currency)
        currency = parse_currency(currency)

        channel_values = SalesChannels.from_sale(sale).as_dict()
        for name in CHANNEL_FIELDS:
            if name in changes:
                channel_values[name] = changes.pop(name)
        cash_in_till = changes.pop("cash_in_till", sale.cash_in_till)
        notes = clean_optional(changes.pop("notes", sale.notes))

        if changes:
            raise TypeError(f"Unknown sale fields: {sorted(changes)}")

        channels = SalesChannels.from_mapping(channel_values)
        result = reconcile(channels, cash_in_till)

        logger.info("Updating sale %s: total=%s difference=%s", sale_id, result.total, result.difference)
        return await self.repo.update(
            sale,
            store_id=store_id,
            currency=currency,
            date=to_date(date_),
            cash_in_till=validate_minor_amount(cash_in_till, "cash_in_till", default=0),
            total=result.total,
            difference=result.difference,
            notes=notes,
            **channels.as_dict(),
        )

    async def check_sale(
        self,
        store_id: int,
        currency: Union[Currency, str],
        date_: Union[datetime.date, str],
    ) -> Optional[Sale]:
        """The recorded sale for the day, or None"""
        return await self.repo.get_by_key(store_id, parse_currency(currency), to_date(date_))

    async def list_sales(
        self,
        store_id: Optional[int] = None,
        currency: Optional[Union[Currency, str]] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Sale]:
        return await self.repo.list(
            store_id=store_id,
            currency=parse_currency(currency) if currency else None,
            start_date=start_date,
            end_date=end_date,
        )

    async def delete_sale(self, sale_id: int) -> None:
        sale = await self.repo.get_or_raise(sale_id)
        await self.repo.delete(sale)

    async def remove_duplicate_sales(self) -> int:
        """
        Deletes duplicate sales, keeping the oldest record of each
        (store, currency, date).

        Returns:
            int: Number of deleted records
        """
        groups: Dict[Tuple[int, Currency, datetime.date], List[Sale]] = defaultdict(list)
        for sale in await self.repo.get_all_by_key_order():
            groups[(sale.store_id, sale.currency, sale.date)].append(sale)

        duplicates = []
        for key, sales in groups.items():
            if len(sales) > 1:
                logger.info("Found %s sales for %s, keeping sale %s", len(sales), key, sales[0].id)
                duplicates.extend(sale.id for sale in sales[1:])

        if not duplicates:
            logger.info("No duplicate sales found")
            return 0

        deleted = await self.repo.delete_many(duplicates)
        logger.info("Deleted %s duplicate sales", deleted)
        return deleted
