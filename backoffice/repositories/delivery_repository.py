import datetime
from typing import List, Optional
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from backoffice.models.delivery import Delivery
from backoffice.repositories.base import BaseRepository


class DeliveryRepository(BaseRepository[Delivery]):
    model = Delivery

    async def list(
        self,
        driver_id: Optional[int] = None,
        store_id: Optional[int] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Delivery]:
        query = select(Delivery).options(
            selectinload(Delivery.driver), selectinload(Delivery.store)
        )
        if driver_id is not None:
            query = query.where(Delivery.driver_id == driver_id)
        if store_id is not None:
            query = query.where(Delivery.store_id == store_id)
        if start_date is not None:
            query = query.where(Delivery.delivery_date >= start_date)
        if end_date is not None:
            query = query.where(Delivery.delivery_date <= end_date)
        result = await self.session.execute(
            query.order_by(Delivery.delivery_date.desc())
        )
        return result.scalars().all()
