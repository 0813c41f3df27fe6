from sqlalchemy import Column, Integer, String, Date, Enum, ForeignKey
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import Currency, PaymentMethod


class Payment(TimestampMixin, Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    amount_paid = Column(Integer, nullable=False)
    currency = Column(Enum(Currency), nullable=False)
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    paid_date = Column(Date, nullable=False, index=True)
    notes = Column(String, nullable=True)

    employee = relationship("Employee", back_populates="payments")
