from typing import List
from sqlalchemy.future import select
from backoffice.models.vendor import Vendor
from backoffice.repositories.base import BaseRepository


class VendorRepository(BaseRepository[Vendor]):
    model = Vendor

    async def get_all(self) -> List[Vendor]:
        result = await self.session.execute(select(Vendor).order_by(Vendor.name))
        return result.scalars().all()
