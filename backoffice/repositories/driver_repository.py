from typing import List
from sqlalchemy import delete
from sqlalchemy.future import select
from backoffice.models.driver import Driver
from backoffice.models.delivery import Delivery
from backoffice.models.assignment import StoreDriver
from backoffice.repositories.base import BaseRepository


class DriverRepository(BaseRepository[Driver]):
    model = Driver

    async def get_all(self) -> List[Driver]:
        result = await self.session.execute(select(Driver).order_by(Driver.name))
        return result.scalars().all()

    async def delete_driver(self, driver: Driver) -> None:
        for model in (Delivery, StoreDriver):
            await self.session.execute(delete(model).where(model.driver_id == driver.id))
        await self.session.delete(driver)
        await self._commit()
