import enum
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from tracker.db.base_class import Base

class UserRole(str, enum.Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.MEMBER.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN.value
