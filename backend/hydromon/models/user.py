"""User and federated Account models."""
import enum
import uuid

from sqlalchemy import (
    Column, DateTime, Enum, ForeignKey, String, UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from hydromon.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(120), nullable=True)
    image = Column(String(500), nullable=True)
    # bcrypt hashes are 60 chars; null for federated-only accounts
    hashed_password = Column(String(128), nullable=True)
    role = Column(
        Enum(
            Role,
            name="user_role",
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
        ),
        nullable=False,
        default=Role.USER,
    )
    email_verified = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    devices = relationship("Device", back_populates="owner", cascade="all, delete-orphan", passive_deletes=True)


class Account(Base):
    """Link between a user and an external identity provider account."""
    __tablename__ = "account"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    provider = Column(String(50), nullable=False)
    provider_account_id = Column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("provider", "provider_account_id", name="uq_account_provider_account"),
    )

    user = relationship("User", back_populates="accounts")
