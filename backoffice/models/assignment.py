from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, utcnow

STORE_EMPLOYEE_CONSTRAINT = "uq_store_employee"
STORE_DRIVER_CONSTRAINT = "uq_store_driver"


class StoreEmployee(Base):
    __tablename__ = "store_employees"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    assigned_at = Column(DateTime, nullable=False, default=utcnow)

    store = relationship("Store", back_populates="employee_links")
    employee = relationship("Employee", back_populates="store_links")

    __table_args__ = (
        UniqueConstraint("store_id", "employee_id", name=STORE_EMPLOYEE_CONSTRAINT),
    )


class StoreDriver(Base):
    __tablename__ = "store_drivers"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False)
    assigned_at = Column(DateTime, nullable=False, default=utcnow)

    store = relationship("Store", back_populates="driver_links")
    driver = relationship("Driver", back_populates="store_links")

    __table_args__ = (
        UniqueConstraint("store_id", "driver_id", name=STORE_DRIVER_CONSTRAINT),
    )
