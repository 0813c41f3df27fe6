import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.models.driver import Driver
from backoffice.repositories.driver_repository import DriverRepository
from backoffice.utils.validators import validate_contact, validate_name

logger = logging.getLogger(__name__)


class DriverService:
    def __init__(self, session: AsyncSession):
        self.repo = DriverRepository(session)

    async def list_drivers(self) -> List[Driver]:
        return await self.repo.get_all()

    async def get_by_id(self, driver_id: int) -> Driver:
        return await self.repo.get_or_raise(driver_id)

    async def create_driver(
        self, name: str, email: Optional[str] = None, phone: Optional[str] = None
    ) -> Driver:
        email, phone = validate_contact(email, phone)
        driver = await self.repo.create(
            name=validate_name(name, "Driver name"), email=email, phone=phone
        )
        logger.info("Created driver %s (%s)", driver.id, driver.name)
        return driver

    async def update_driver(
        self,
        driver_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Driver:
        driver = await self.get_by_id(driver_id)
        email, phone = validate_contact(
            email if email is not None else driver.email,
            phone if phone is not None else driver.phone,
        )
        return await self.repo.update(
            driver,
            name=validate_name(name, "Driver name") if name is not None else driver.name,
            email=email,
            phone=phone,
        )

    async def delete_driver(self, driver_id: int) -> None:
        """Deletes the driver, their deliveries and store assignments"""
        driver = await self.get_by_id(driver_id)
        logger.info("Deleting driver %s (%s)", driver.id, driver.name)
        await self.repo.delete_driver(driver)
