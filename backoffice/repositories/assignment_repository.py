from typing import List, Optional
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from backoffice.models.assignment import (
    StoreEmployee,
    StoreDriver,
    STORE_EMPLOYEE_CONSTRAINT,
    STORE_DRIVER_CONSTRAINT,
)
from backoffice.repositories.base import BaseRepository


class StoreEmployeeRepository(BaseRepository[StoreEmployee]):
    model = StoreEmployee

    async def get_by_key(self, store_id: int, employee_id: int) -> Optional[StoreEmployee]:
        result = await self.session.execute(
            select(StoreEmployee).filter_by(store_id=store_id, employee_id=employee_id)
        )
        return result.scalar_one_or_none()

    async def create(self, store_id: int, employee_id: int) -> StoreEmployee:
        link = StoreEmployee(store_id=store_id, employee_id=employee_id)
        self.session.add(link)
        await self._commit_unique(
            STORE_EMPLOYEE_CONSTRAINT,
            ("store_id", "employee_id"),
            {"store_id": store_id, "employee_id": employee_id},
        )
        await self.session.refresh(link)
        return link

    async def list_by_store(self, store_id: int) -> List[StoreEmployee]:
        result = await self.session.execute(
            select(StoreEmployee)
            .options(selectinload(StoreEmployee.employee))
            .filter_by(store_id=store_id)
            .order_by(StoreEmployee.assigned_at.desc())
        )
        return result.scalars().all()

    async def get_store_ids(self, employee_id: int) -> List[int]:
        result = await self.session.execute(
            select(StoreEmployee.store_id).filter_by(employee_id=employee_id)
        )
        return list(result.scalars().all())


class StoreDriverRepository(BaseRepository[StoreDriver]):
    model = StoreDriver

    async def get_by_key(self, store_id: int, driver_id: int) -> Optional[StoreDriver]:
        result = await self.session.execute(
            select(StoreDriver).filter_by(store_id=store_id, driver_id=driver_id)
        )
        return result.scalar_one_or_none()

    async def create(self, store_id: int, driver_id: int) -> StoreDriver:
        link = StoreDriver(store_id=store_id, driver_id=driver_id)
        self.session.add(link)
        await self._commit_unique(
            STORE_DRIVER_CONSTRAINT,
            ("store_id", "driver_id"),
            {"store_id": store_id, "driver_id": driver_id},
        )
        await self.session.refresh(link)
        return link

    async def list_by_store(self, store_id: int) -> List[StoreDriver]:
        result = await self.session.execute(
            select(StoreDriver)
            .options(selectinload(StoreDriver.driver))
            .filter_by(store_id=store_id)
            .order_by(StoreDriver.assigned_at.desc())
        )
        return result.scalars().all()
