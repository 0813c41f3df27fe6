import datetime
import logging
from typing import Any, List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from backoffice.core.enums import Currency, ExpenseStatus
from backoffice.core.exceptions import AlreadyPaidError
from backoffice.models.expense import Expense
from backoffice.repositories.expense_repository import ExpenseRepository
from backoffice.repositories.store_repository import StoreRepository
from backoffice.repositories.vendor_repository import VendorRepository
from backoffice.services.currency_policy import parse_currency, validate_currency
from backoffice.utils.date_utils import to_date
from backoffice.utils.validators import clean_optional, validate_minor_amount

logger = logging.getLogger(__name__)


def mark_paid(expense: Expense) -> Expense:
    """
    Moves the expense to PAID in memory.

    Raises:
        AlreadyPaidError: If the expense is already paid
    """
    status = ExpenseStatus(expense.status)
    if status is ExpenseStatus.PAID:
        raise AlreadyPaidError(expense.id)
    if status is ExpenseStatus.RAISED:
        expense.status = ExpenseStatus.PAID
        return expense
    raise ValueError(f"Unhandled expense status {status}")


class ExpenseService:
    def __init__(self, session: AsyncSession):
        self.repo = ExpenseRepository(session)
        self.store_repo = StoreRepository(session)
        self.vendor_repo = VendorRepository(session)

    async def raise_expense(
        self,
        store_id: int,
        vendor_id: int,
        amount: int,
        currency: Union[Currency, str],
        expense_date: Union[datetime.date, str, None] = None,
        description: Optional[str] = None,
    ) -> Expense:
        """
        Records a vendor expense in the RAISED state.

        Raises:
            NotFoundError: Unknown store or vendor
            UnsupportedCurrencyError: The store does not take the currency
            InvalidAmountError: Negative or malformed amount
        """
        store = await self.store_repo.get_or_raise(store_id)
        await self.vendor_repo.get_or_raise(vendor_id)
        currency = validate_currency(store, currency)

        expense = await self.repo.create(
            store_id=store_id,
            vendor_id=vendor_id,
            amount=validate_minor_amount(amount, "amount"),
            currency=currency,
            status=ExpenseStatus.RAISED,
            expense_date=to_date(expense_date) if expense_date else datetime.date.today(),
            description=clean_optional(description),
        )
        logger.info(
            "Raised expense %s: store %s, vendor %s, %s %s",
            expense.id,
            store_id,
            vendor_id,
            expense.amount,
            currency.value,
        )
        return expense

    async def settle(self, expense_id: int, idempotent: bool = False) -> Expense:
        """
        Marks the expense as paid.

        Args:
            expense_id: ID of the expense
            idempotent: Return an already paid expense unchanged instead of raising

        Raises:
            AlreadyPaidError: If the expense is already paid and idempotent is False
        """
        expense = await self.repo.get_or_raise(expense_id)
        try:
            mark_paid(expense)
        except AlreadyPaidError:
            if idempotent:
                logger.info("Expense %s already paid, nothing to do", expense_id)
                return expense
            logger.warning("Expense %s is already paid", expense_id)
            raise

        logger.info("Expense %s paid", expense_id)
        return await self.repo.update(expense)

    async def update_expense(self, expense_id: int, **changes: Any) -> Expense:
        """
        Corrects expense details. The status is not editable here, use settle().
        """
        expense = await self.repo.get_or_raise(expense_id)

        if "status" in changes:
            raise TypeError("Expense status can only be changed by settle()")

        fields = {}
        store_id = changes.pop("store_id", expense.store_id)
        currency = changes.pop("currency", expense.currency)
        store = await self.store_repo.get_or_raise(store_id)
        fields["store_id"] = store_id
        fields["currency"] = validate_currency(store, currency)

        if "vendor_id" in changes:
            fields["vendor_id"] = (await self.vendor_repo.get_or_raise(changes.pop("vendor_id"))).id
        if "amount" in changes:
            fields["amount"] = validate_minor_amount(changes.pop("amount"), "amount")
        if "expense_date" in changes:
            fields["expense_date"] = to_date(changes.pop("expense_date"))
        if "description" in changes:
            fields["description"] = clean_optional(changes.pop("description"))

        if changes:
            raise TypeError(f"Unknown expense fields: {sorted(changes)}")

        logger.info("Updating expense %s: %s", expense_id, sorted(fields))
        return await self.repo.update(expense, **fields)

    async def list_expenses(
        self,
        store_id: Optional[int] = None,
        vendor_id: Optional[int] = None,
        currency: Optional[Union[Currency, str]] = None,
        status: Optional[ExpenseStatus] = None,
        start_date: Optional[datetime.date] = None,
        end_date: Optional[datetime.date] = None,
    ) -> List[Expense]:
        return await self.repo.list(
            store_id=store_id,
            vendor_id=vendor_id,
            currency=parse_currency(currency) if currency else None,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )

    async def delete_expense(self, expense_id: int) -> None:
        expense = await self.repo.get_or_raise(expense_id)
        await self.repo.delete(expense)
