import datetime
from typing import List, Optional
from sqlalchemy import delete
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from backoffice.core.enums import Currency
from backoffice.models.sale import Sale, SALE_KEY_CONSTRAINT
from backoffice.repositories.base import BaseRepository

SALE_KEY_COLUMNS = ("store_id", "currency", "date")


class SaleRepository(BaseRepository[Sale]):
    model = Sale

    async def get_by_key(
        self, store_id: int, currency: Currency, date_: datetime.date
    ) -> Optional[Sale]:
        result = await self.session.execute(
            select(Sale)
            .filter_by(store_id=store_id, currency=currency, date=date_)
            .order_by(Sale.created_at, Sale.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def create(self, **fields) -> Sale:
        sale = Sale(**fields)
        self.session.add(sale)
        await self._commit_unique(
            SALE_KEY_CONSTRAINT,
            SALE_KEY_COLUMNS,
            {column: fields.get(column) for column in SALE_KEY_COLUMNS},
        )
        await self.session.refresh(sale)
        return sale

    async def update(self, sale: Sale, **fields) -> Sale:
        for name, value in fields.items():
            setattr(sale, name, value)
        self.session.add(sale)
        await self._commit_unique(
            SALE_KEY_CONSTRAINT,
            SALE_KEY_COLUMNS,
            {column: getattr(sale, column) for column in SALE_KEY_COLUMNS},
        )
        await self.session.refresh(sale)
        return sale

    async def list(
        self,
        store_id: Optional[int] = None,
        currency: Optional[Currency] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Sale]:
        query = select(Sale).options(selectinload(Sale.store))
        if store_id is not None:
            query = query.where(Sale.store_id == store_id)
        if currency is not None:
            query = query.where(Sale.currency == currency)
        if start_date is not None:
            query = query.where(Sale.date >= start_date)
        if end_date is not None:
            query = query.where(Sale.date <= end_date)
        result = await self.session.execute(query.order_by(Sale.date.desc()))
        return result.scalars().all()

    async def get_all_by_key_order(self) -> List[Sale]:
        """All sales ordered by key, the oldest row of each key first"""
        result = await self.session.execute(
            select(Sale).order_by(
                Sale.store_id, Sale.currency, Sale.date, Sale.created_at, Sale.id
            )
        )
        return result.scalars().all()

    async def delete_many(self, sale_ids: List[int]) -> int:
        if not sale_ids:
            return 0
        result = await self.session.execute(delete(Sale).where(Sale.id.in_(sale_ids)))
        await self._commit()
        return result.rowcount
