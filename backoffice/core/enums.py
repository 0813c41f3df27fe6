from enum import Enum


class Currency(str, Enum):
    EUR = "EUR"
    GBP = "GBP"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class WageType(str, Enum):
    HOURLY = "HOURLY"
    FIXED = "FIXED"


class ExpenseStatus(str, Enum):
    RAISED = "RAISED"
    PAID = "PAID"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    ACCOUNT = "ACCOUNT"
