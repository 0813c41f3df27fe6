from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin


class Driver(TimestampMixin, Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)

    deliveries = relationship("Delivery", back_populates="driver")
    store_links = relationship("StoreDriver", back_populates="driver")
