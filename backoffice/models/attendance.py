from sqlalchemy import Column, Integer, String, DateTime, Numeric, Enum, ForeignKey
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import Currency, WageType


class Attendance(TimestampMixin, Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    check_in = Column(DateTime, nullable=False, index=True)
    check_out = Column(DateTime, nullable=False)
    hours_worked = Column(Numeric(10, 2), nullable=False)
    currency = Column(Enum(Currency), nullable=False)
    amount_to_pay = Column(Integer, nullable=False)
    # wage type the amount was computed with
    wage_type = Column(Enum(WageType), nullable=True)
    notes = Column(String, nullable=True)

    employee = relationship("Employee", back_populates="attendance")
    store = relationship("Store", back_populates="attendance")
