# pos_api/models/users.py

from sqlalchemy import CheckConstraint, Column, Integer, String, DateTime
from sqlalchemy.sql import func

from pos_api.database import Base

ROLE_ADMIN = "admin"
ROLE_SELLER = "seller"
ROLES = (ROLE_ADMIN, ROLE_SELLER)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    role = Column(String, nullable=False, default=ROLE_SELLER)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('admin', 'seller')", name="ck_user_role_valid"),
    )
