"""Notification delivery and read tracking for the marketplace apps."""
