"""Audit sink for working hours changes.

Entries are added to the caller's session so they commit or roll back with
the change they describe.
"""

import logging
from typing import Any, Dict, Optional

from sqlmodel import Session

from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


class AuditService:
    def record(
        self,
        session: Session,
        event_type: str,
        entity_type: str,
        entity_id: int,
        details: Optional[Dict[str, Any]] = None,
    ) -> AuditLog:
        entry = AuditLog(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details or {},
        )
        session.add(entry)
        logger.info(f"Audit {event_type} for {entity_type}:{entity_id}")
        return entry


# Singleton instance
_audit_service: Optional[AuditService] = None


def get_audit_service() -> AuditService:
    """Get or create the singleton AuditService instance."""
    global _audit_service
    if _audit_service is None:
        _audit_service = AuditService()
    return _audit_service
