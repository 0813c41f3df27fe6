from typing import List
from sqlalchemy import delete
from sqlalchemy.future import select
from backoffice.models.employee import Employee
from backoffice.models.attendance import Attendance
from backoffice.models.payment import Payment
from backoffice.models.assignment import StoreEmployee
from backoffice.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    model = Employee

    async def get_all(self) -> List[Employee]:
        result = await self.session.execute(select(Employee).order_by(Employee.name))
        return result.scalars().all()

    async def delete_employee(self, employee: Employee) -> None:
        """Delete the employee with their attendance, payments and store links"""
        for model in (Attendance, Payment, StoreEmployee):
            await self.session.execute(
                delete(model).where(model.employee_id == employee.id)
            )
        await self.session.delete(employee)
        await self._commit()
