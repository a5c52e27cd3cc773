"""SQLAlchemy model for registered push tokens."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, Integer, String, UniqueConstraint

from marketnotify.infrastructure.database import Base


class PushTokenModel(Base):
    """Database representation for Expo push tokens."""

    __tablename__ = "push_token"
    __table_args__ = (
        UniqueConstraint("recipient_id", "recipient_role", "token", name="uq_push_token_scope"),
        Index("ix_push_token_scope_active", "recipient_id", "recipient_role", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, nullable=False)
    recipient_role = Column(String(20), nullable=False)
    token = Column(String(255), nullable=False)
    device_info = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(), nullable=False)
    last_seen_at = Column(DateTime(), nullable=False)


__all__ = ["PushTokenModel"]
