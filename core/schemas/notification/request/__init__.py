"""Request schemas for the notification endpoints."""
