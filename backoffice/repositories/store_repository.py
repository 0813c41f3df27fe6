from typing import List
from sqlalchemy import delete
from sqlalchemy.future import select
from backoffice.models.store import Store
from backoffice.models.sale import Sale
from backoffice.models.expense import Expense
from backoffice.models.attendance import Attendance
from backoffice.models.delivery import Delivery
from backoffice.models.assignment import StoreEmployee, StoreDriver
from backoffice.repositories.base import BaseRepository


class StoreRepository(BaseRepository[Store]):
    model = Store

    async def get_all(self) -> List[Store]:
        result = await self.session.execute(
            select(Store).order_by(Store.created_at.desc(), Store.id.desc())
        )
        return result.scalars().all()

    async def get_by_ids(self, store_ids: List[int]) -> List[Store]:
        if not store_ids:
            return []
        result = await self.session.execute(
            select(Store).where(Store.id.in_(store_ids))
        )
        return result.scalars().all()

    async def delete_store(self, store: Store) -> None:
        """Delete the store together with every row that references it"""
        for model in (Sale, Expense, Attendance, Delivery, StoreEmployee, StoreDriver):
            await self.session.execute(delete(model).where(model.store_id == store.id))
        await self.session.delete(store)
        await self._commit()
