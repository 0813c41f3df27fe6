from sqlalchemy import Column, Integer, String, Enum
from backoffice.core.database import Base, TimestampMixin
from backoffice.core.enums import UserRole


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.USER)
