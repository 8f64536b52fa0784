"""Audit trail of access-rule changes."""
from __future__ import annotations

from share_access.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
