"""SQLAlchemy models for push preferences and the push delivery log."""

from sqlalchemy import JSON, Column, DateTime, Index, Integer, String, Text, UniqueConstraint

from marketnotify.infrastructure.database import Base


class PushSettingsModel(Base):
    """Stored push preferences of a recipient scope."""

    __tablename__ = "push_settings"
    __table_args__ = (
        UniqueConstraint("recipient_id", "recipient_role", name="uq_push_settings_scope"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, nullable=False)
    recipient_role = Column(String(20), nullable=False)
    settings = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(), nullable=False)
    updated_at = Column(DateTime(), nullable=False)


class PushDeliveryModel(Base):
    """One row per push attempt made for a stored notification."""

    __tablename__ = "push_delivery_log"
    __table_args__ = (
        Index("ix_push_delivery_scope_created", "recipient_id", "recipient_role", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, nullable=False)
    recipient_role = Column(String(20), nullable=False)
    title = Column(String(120), nullable=False)
    body = Column(Text, nullable=False)
    status = Column(String(20), nullable=False)
    detail = Column(Text, nullable=True)
    created_at = Column(DateTime(), nullable=False)


__all__ = ["PushDeliveryModel", "PushSettingsModel"]
