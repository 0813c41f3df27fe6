import logging
from typing import Iterable, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.exceptions import UniqueConstraintConflict
from backoffice.models.store import Store
from backoffice.models.assignment import StoreEmployee, StoreDriver
from backoffice.repositories.store_repository import StoreRepository
from backoffice.repositories.employee_repository import EmployeeRepository
from backoffice.repositories.driver_repository import DriverRepository
from backoffice.repositories.assignment_repository import (
    StoreEmployeeRepository,
    StoreDriverRepository,
)
from backoffice.services.currency_policy import normalize_store_currencies
from backoffice.utils.validators import clean_optional, validate_name

logger = logging.getLogger(__name__)


class StoreService:
    def __init__(self, session: AsyncSession):
        self.repo = StoreRepository(session)
        self.employee_repo = EmployeeRepository(session)
        self.driver_repo = DriverRepository(session)
        self.store_employee_repo = StoreEmployeeRepository(session)
        self.store_driver_repo = StoreDriverRepository(session)

    async def list_stores(self) -> List[Store]:
        return await self.repo.get_all()

    async def get_by_id(self, store_id: int) -> Store:
        """Get a store by ID, NotFoundError if it does not exist"""
        return await self.repo.get_or_raise(store_id)

    async def create_store(
        self,
        name: str,
        address: Optional[str] = None,
        phone: Optional[str] = None,
        manager_name: Optional[str] = None,
        supported_currencies: Optional[Iterable[str]] = None,
        default_currency: Optional[str] = None,
    ) -> Store:
        name = validate_name(name, "Store name")
        currencies, default = normalize_store_currencies(
            supported_currencies, default_currency
        )
        store = await self.repo.create(
            name=name,
            address=clean_optional(address),
            phone=clean_optional(phone),
            manager_name=clean_optional(manager_name),
            supported_currencies=[currency.value for currency in currencies],
            default_currency=default,
        )
        logger.info(
            "Created store %s (%s), currencies %s",
            store.id,
            store.name,
            store.supported_currencies,
        )
        return store

    async def update_store(self, store_id: int, **changes) -> Store:
        """
        Updates store details.

        Changing either currency field re-applies the same normalisation as
        store creation, so the default currency stays in the supported set.
        """
        store = await self.get_by_id(store_id)
        fields = {}

        if "name" in changes:
            fields["name"] = validate_name(changes["name"], "Store name")
        for optional in ("address", "phone", "manager_name"):
            if optional in changes:
                fields[optional] = clean_optional(changes[optional])

        if "supported_currencies" in changes or "default_currency" in changes:
            currencies, default = normalize_store_currencies(
                changes.get("supported_currencies", store.supported_currencies),
                changes.get("default_currency", store.default_currency),
            )
            fields["supported_currencies"] = [currency.value for currency in currencies]
            fields["default_currency"] = default

        logger.info("Updating store %s: %s", store_id, sorted(fields))
        return await self.repo.update(store, **fields)

    async def delete_store(self, store_id: int) -> None:
        """
        Deletes the store and every record that references it:
        sales, expenses, attendance, deliveries and staff assignments.
        """
        store = await self.get_by_id(store_id)
        logger.info("Deleting store %s (%s) with dependent records", store.id, store.name)
        await self.repo.delete_store(store)

    async def assign_employee(self, store_id: int, employee_id: int) -> StoreEmployee:
        """
        Assigns an employee to a store.

        Assigning twice returns the existing link, including when a concurrent
        request created it between our lookup and insert.
        """
        await self.get_by_id(store_id)
        await self.employee_repo.get_or_raise(employee_id)

        link = await self.store_employee_repo.get_by_key(store_id, employee_id)
        if link:
            logger.info("Employee %s already assigned to store %s", employee_id, store_id)
            return link

        try:
            return await self.store_employee_repo.create(store_id, employee_id)
        except UniqueConstraintConflict:
            return await self.store_employee_repo.get_by_key(store_id, employee_id)

    async def unassign_employee(self, store_id: int, employee_id: int) -> bool:
        link = await self.store_employee_repo.get_by_key(store_id, employee_id)
        if not link:
            logger.warning("Employee %s is not assigned to store %s", employee_id, store_id)
            return False
        await self.store_employee_repo.delete(link)
        return True

    async def list_employees(self, store_id: int) -> List[StoreEmployee]:
        return await self.store_employee_repo.list_by_store(store_id)

    async def assign_driver(self, store_id: int, driver_id: int) -> StoreDriver:
        await self.get_by_id(store_id)
        await self.driver_repo.get_or_raise(driver_id)

        link = await self.store_driver_repo.get_by_key(store_id, driver_id)
        if link:
            logger.info("Driver %s already assigned to store %s", driver_id, store_id)
            return link

        try:
            return await self.store_driver_repo.create(store_id, driver_id)
        except UniqueConstraintConflict:
            return await self.store_driver_repo.get_by_key(store_id, driver_id)

    async def unassign_driver(self, store_id: int, driver_id: int) -> bool:
        link = await self.store_driver_repo.get_by_key(store_id, driver_id)
        if not link:
            logger.warning("Driver %s is not assigned to store %s", driver_id, store_id)
            return False
        await self.store_driver_repo.delete(link)
        return True

    async def list_drivers(self, store_id: int) -> List[StoreDriver]:
        return await self.store_driver_repo.list_by_store(store_id)
