"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from marketnotify.infrastructure.database import Base
from marketnotify.utils import ensure_naive_utc, now_utc


def _now_naive_utc():
    return ensure_naive_utc(now_utc())


class NotificationModel(Base):
    """Database representation for recipient notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index(
            "ix_notification_scope_created",
            "recipient_id",
            "recipient_role",
            "created_at",
            "id",
        ),
        Index("ix_notification_scope_unread", "recipient_id", "recipient_role", "is_read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, nullable=False)
    recipient_role = Column(String(20), nullable=False)
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, default=_now_naive_utc)


__all__ = ["NotificationModel"]
