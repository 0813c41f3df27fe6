"""
Domain exceptions of the back office.

Every exception derives from BackOfficeError. Input validation errors also
derive from ValueError.
"""


class BackOfficeError(Exception):
    """Base class for all back office errors."""

    pass


class NotFoundError(BackOfficeError, LookupError):
    """Referenced entity does not exist."""

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class UnsupportedCurrencyError(BackOfficeError, ValueError):
    """Currency is unknown or not supported by the store."""

    def __init__(self, currency, store_name: str = None):
        self.currency = currency
        self.store_name = store_name
        if store_name:
            message = f"Store {store_name} does not support {currency}"
        else:
            message = f"Unsupported currency: {currency}"
        super().__init__(message)


class InvalidAmountError(BackOfficeError, ValueError):
    """Negative, non-integral or non-finite amount."""

    pass


class InvalidIntervalError(BackOfficeError, ValueError):
    """Check-out is not after check-in."""

    pass


class MissingRateError(BackOfficeError, ValueError):
    """
    Employee has no rate configured for the requested currency and wage type.

    This is a configuration problem: the Employee record has to be fixed,
    retrying will not help.
    """

    def __init__(self, employee_name: str, wage_type, currency):
        self.wage_type = wage_type
        self.currency = currency
        kind = "hourly rate" if wage_type.value == "HOURLY" else "weekly wage"
        super().__init__(
            f"Employee {employee_name} does not have {kind} set for {currency.value}"
        )


class AlreadyPaidError(BackOfficeError):
    """Expense is already in the terminal PAID state."""

    def __init__(self, expense_id):
        self.expense_id = expense_id
        super().__init__(f"Expense {expense_id} is already paid")


class UniqueConstraintConflict(BackOfficeError):
    """
    Insert violated one of the compound unique keys.

    Raised by repositories instead of the raw IntegrityError so that services
    can retry the write as an update.
    """

    def __init__(self, constraint: str, key: dict):
        self.constraint = constraint
        self.key = key
        super().__init__(f"Unique constraint {constraint} violated for {key}")


class EntityInUseError(BackOfficeError):
    """Entity cannot be deleted while other records reference it."""

    def __init__(self, entity: str, entity_id, references: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} is referenced by {references}")
