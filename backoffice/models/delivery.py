from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    Numeric,
    Enum,
    ForeignKey,
)
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import Currency


class Delivery(TimestampMixin, Base):
    __tablename__ = "deliveries"

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    delivery_date = Column(Date, nullable=False, index=True)
    check_in = Column(DateTime, nullable=False)
    check_out = Column(DateTime, nullable=False)
    hours_worked = Column(Numeric(10, 2), nullable=False)
    number_of_deliveries = Column(Integer, nullable=False)
    currency = Column(Enum(Currency), nullable=False)
    expense_amount = Column(Integer, nullable=False, default=0)
    notes = Column(String, nullable=True)

    driver = relationship("Driver", back_populates="deliveries")
    store = relationship("Store", back_populates="deliveries")
