"""Response schemas for the notification endpoints."""
