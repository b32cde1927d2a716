import uuid
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from app.db.base import Base


def _new_user_id() -> str:
    return f"user_{uuid.uuid4().hex}"


class User(Base):
    """
    Identity record backing the local identity provider.

    `plan` is the entitlement source ("free" | "premium").
    `free_usage` is NULL until the first request normalizes it to 0.
    `private_metadata` holds arbitrary provider-side key/values.
    """
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=_new_user_id)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String)
    plan = Column(String, nullable=False, default="free", server_default="free")
    free_usage = Column(Integer, nullable=True)
    private_metadata = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, plan='{self.plan}', free_usage={self.free_usage})>"
