import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.exceptions import EntityInUseError
from backoffice.models.vendor import Vendor
from backoffice.repositories.expense_repository import ExpenseRepository
from backoffice.repositories.vendor_repository import VendorRepository
from backoffice.utils.validators import clean_optional, validate_contact, validate_name

logger = logging.getLogger(__name__)


class VendorService:
    def __init__(self, session: AsyncSession):
        self.repo = VendorRepository(session)
        self.expense_repo = ExpenseRepository(session)

    async def list_vendors(self) -> List[Vendor]:
        return await self.repo.get_all()

    async def get_by_id(self, vendor_id: int) -> Vendor:
        return await self.repo.get_or_raise(vendor_id)

    async def create_vendor(
        self,
        name: str,
        contact_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Vendor:
        email, phone = validate_contact(email, phone)
        vendor = await self.repo.create(
            name=validate_name(name, "Vendor name"),
            contact_name=clean_optional(contact_name),
            email=email,
            phone=phone,
        )
        logger.info("Created vendor %s (%s)", vendor.id, vendor.name)
        return vendor

    async def update_vendor(self, vendor_id: int, **changes) -> Vendor:
        vendor = await self.get_by_id(vendor_id)
        fields = {}

        if "name" in changes:
            fields["name"] = validate_name(changes.pop("name"), "Vendor name")
        if "contact_name" in changes:
            fields["contact_name"] = clean_optional(changes.pop("contact_name"))
        if "email" in changes or "phone" in changes:
            fields["email"], fields["phone"] = validate_contact(
                changes.pop("email", vendor.email), changes.pop("phone", vendor.phone)
            )

        if changes:
            raise TypeError(f"Unknown vendor fields: {sorted(changes)}")

        return await self.repo.update(vendor, **fields)

    async def delete_vendor(self, vendor_id: int) -> None:
        """
        Deletes a vendor that has no expenses.

        Raises:
            EntityInUseError: If expenses still reference the vendor
        """
        vendor = await self.get_by_id(vendor_id)
        expenses = await self.expense_repo.count(vendor_id=vendor_id)
        if expenses:
            raise EntityInUseError("Vendor", vendor_id, f"{expenses} expenses")
        await self.repo.delete(vendor)
