from sqlalchemy import Column, Integer, String, Date, Enum, ForeignKey
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import Currency, ExpenseStatus


class Expense(TimestampMixin, Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False)
    currency = Column(Enum(Currency), nullable=False)
    status = Column(Enum(ExpenseStatus), nullable=False, default=ExpenseStatus.RAISED)
    amount = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    expense_date = Column(Date, nullable=False)

    store = relationship("Store", back_populates="expenses")
    vendor = relationship("Vendor", back_populates="expenses")
