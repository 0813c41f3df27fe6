from sqlalchemy import Column, Integer, String, Numeric, Enum
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import WageType


class Employee(TimestampMixin, Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    wage_type = Column(Enum(WageType), nullable=False, default=WageType.HOURLY)
    # major units (15.00 = 15 EUR per hour)
    hourly_rate_eur = Column(Numeric(10, 2), nullable=True)
    hourly_rate_gbp = Column(Numeric(10, 2), nullable=True)
    weekly_wage_eur = Column(Numeric(10, 2), nullable=True)
    weekly_wage_gbp = Column(Numeric(10, 2), nullable=True)

    attendance = relationship("Attendance", back_populates="employee")
    store_links = relationship("StoreEmployee", back_populates="employee")
    payments = relationship("Payment", back_populates="employee")
