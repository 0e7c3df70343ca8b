"""Repository interfaces."""

from .audit_store import AuditStore

__all__ = ["AuditStore"]
