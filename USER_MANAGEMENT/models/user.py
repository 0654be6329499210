from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, BigInteger, Integer
from core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    mobile = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False)
    profile_image = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    # keep sqlite from handing out ids of deleted rows
    __table_args__ = {"sqlite_autoincrement": True}

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
