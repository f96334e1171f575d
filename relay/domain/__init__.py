"""Domain models for the notification relay."""

from .models import Document, EmailPayload, EmailRequest

__all__ = ["Document", "EmailPayload", "EmailRequest"]
