import logging
from typing import Any, List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import WageType
from backoffice.models.employee import Employee
from backoffice.repositories.employee_repository import EmployeeRepository
from backoffice.utils.validators import validate_contact, validate_name, validate_rate

logger = logging.getLogger(__name__)

RATE_FIELDS = ("hourly_rate_eur", "hourly_rate_gbp", "weekly_wage_eur", "weekly_wage_gbp")


def parse_wage_type(value: Union[WageType, str, None]) -> WageType:
    if value is None or value == "":
        return WageType.HOURLY
    if isinstance(value, WageType):
        return value
    try:
        return WageType(str(value).strip().upper())
    except ValueError:
        raise ValueError(f"Invalid wage type: {value}. Use HOURLY or FIXED.")


class EmployeeService:
    def __init__(self, session: AsyncSession):
        self.repo = EmployeeRepository(session)

    async def list_employees(self) -> List[Employee]:
        return await self.repo.get_all()

    async def get_by_id(self, employee_id: int) -> Employee:
        return await self.repo.get_or_raise(employee_id)

    async def create_employee(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        wage_type: Union[WageType, str, None] = None,
        **rates: Any,
    ) -> Employee:
        """
        Creates an employee.

        Args:
            name: Full name
            email: Optional email
            phone: Optional phone
            wage_type: HOURLY (default) or FIXED
            **rates: hourly_rate_eur, hourly_rate_gbp, weekly_wage_eur, weekly_wage_gbp in major units

        Returns:
            Employee: The created employee
        """
        unknown = set(rates) - set(RATE_FIELDS)
        if unknown:
            raise TypeError(f"Unknown rate fields: {sorted(unknown)}")

        email, phone = validate_contact(email, phone)
        employee = await self.repo.create(
            name=validate_name(name, "Employee name"),
            email=email,
            phone=phone,
            wage_type=parse_wage_type(wage_type),
            **{field: validate_rate(rates.get(field), field) for field in RATE_FIELDS},
        )
        logger.info(
            "Created employee %s (%s), wage type %s",
            employee.id,
            employee.name,
            employee.wage_type.value,
        )
        return employee

    async def update_employee(self, employee_id: int, **changes: Any) -> Employee:
        """Updates details, wage type or rates; already computed attendance is not touched"""
        employee = await self.get_by_id(employee_id)
        fields = {}

        if "name" in changes:
            fields["name"] = validate_name(changes.pop("name"), "Employee name")
        if "email" in changes or "phone" in changes:
            fields["email"], fields["phone"] = validate_contact(
                changes.pop("email", employee.email), changes.pop("phone", employee.phone)
            )
        if "wage_type" in changes:
            fields["wage_type"] = parse_wage_type(changes.pop("wage_type"))
        for field in RATE_FIELDS:
            if field in changes:
                fields[field] = validate_rate(changes.pop(field), field)

        if changes:
            raise TypeError(f"Unknown employee fields: {sorted(changes)}")

        logger.info("Updating employee %s: %s", employee_id, sorted(fields))
        return await self.repo.update(employee, **fields)

    async def delete_employee(self, employee_id: int) -> None:
        employee = await self.get_by_id(employee_id)
        logger.info("Deleting employee %s (%s)", employee.id, employee.name)
        await self.repo.delete_employee(employee)
