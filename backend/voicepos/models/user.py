from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from voicepos.db.base import Base

ROLE_ADMIN = "admin"
ROLE_CASHIER = "cashier"


class User(Base):
    """Operator account. Every product and sale is scoped to one of these."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default=ROLE_ADMIN)  # admin | cashier
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
