from sqlalchemy import Column, Integer, String, JSON, Enum
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import Currency


class Store(TimestampMixin, Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    manager_name = Column(String, nullable=True)
    # currency codes, e.g. ["EUR", "GBP"]
    supported_currencies = Column(JSON, nullable=False, default=lambda: ["EUR"])
    default_currency = Column(Enum(Currency), nullable=False, default=Currency.EUR)

    sales = relationship("Sale", back_populates="store")
    expenses = relationship("Expense", back_populates="store")
    attendance = relationship("Attendance", back_populates="store")
    deliveries = relationship("Delivery", back_populates="store")
    employee_links = relationship("StoreEmployee", back_populates="store")
    driver_links = relationship("StoreDriver", back_populates="store")

    @property
    def currencies(self):
        return [Currency(code) for code in self.supported_currencies or []]
