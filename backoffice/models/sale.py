from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    Enum,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import Currency

SALE_KEY_CONSTRAINT = "uq_sale_store_currency_date"

# order matters: it is the order of the till sheet
CHANNEL_FIELDS = (
    "cash",
    "online",
    "delivery",
    "just_eat",
    "mylocal",
    "credit_card",
    "deliveroo",
    "uber_eats",
)


class Sale(TimestampMixin, Base):
    __tablename__ = "sales"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    date = Column(Date, nullable=False)
    currency = Column(Enum(Currency), nullable=False)

    cash = Column(Integer, nullable=False, default=0)
    online = Column(Integer, nullable=False, default=0)
    delivery = Column(Integer, nullable=False, default=0)
    just_eat = Column(Integer, nullable=False, default=0)
    mylocal = Column(Integer, nullable=False, default=0)
    credit_card = Column(Integer, nullable=False, default=0)
    deliveroo = Column(Integer, nullable=False, default=0)
    uber_eats = Column(Integer, nullable=False, default=0)

    total = Column(Integer, nullable=False, default=0)
    cash_in_till = Column(Integer, nullable=False, default=0)
    difference = Column(Integer, nullable=False, default=0)
    notes = Column(String, nullable=True)

    store = relationship("Store", back_populates="sales")

    __table_args__ = (
        UniqueConstraint("store_id", "currency", "date", name=SALE_KEY_CONSTRAINT),
    )
