from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin


class Vendor(TimestampMixin, Base):
    __tablename__ = "vendors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    contact_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    expenses = relationship("Expense", back_populates="vendor")
