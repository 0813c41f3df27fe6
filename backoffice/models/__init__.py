"""
Data models of the multi-store back office.
"""

from .store import Store
from .employee import Employee
from .driver import Driver
from .vendor import Vendor
from .sale import Sale
from .expense import Expense
from .attendance import Attendance
from .delivery import Delivery
from .payment import Payment
from .assignment import StoreEmployee, StoreDriver
from .user import User

__all__ = [
    "Store",
    "Employee",
    "Driver",
    "Vendor",
    "Sale",
    "Expense",
    "Attendance",
    "Delivery",
    "Payment",
    "StoreEmployee",
    "StoreDriver",
    "User",
]
