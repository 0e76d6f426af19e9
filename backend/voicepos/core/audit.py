"""
Audit logging for security-critical and money-moving operations.

Events go to the dedicated "audit" logger as one JSON object per line so they
can be shipped separately from application logs. Nothing here is persisted.
Passwords and tokens are never logged.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from voicepos.models.user import User

audit_logger = logging.getLogger("audit")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for security-critical events."""

    @staticmethod
    def log_authentication(
        action: str,  # "login", "register", "failed_login"
        email: str,
        ip_address: str,
        success: bool,
        reason: str = "",
    ):
        """
        Log authentication events.

        Usage:
            AuditLog.log_authentication("login", "owner@shop.com", "192.168.1.1", True)
            AuditLog.log_authentication("failed_login", "owner@shop.com", "192.168.1.1", False, reason="Invalid password")
        """
        log_entry = {
            "timestamp": _timestamp(),
            "event_type": f"auth.{action}",
            "email": email,
            "ip_address": ip_address,
            "success": success,
        }

        if reason and not success:
            log_entry["reason"] = reason

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete"
        resource_type: str,  # "product", "sale"
        resource_id: int,
        user: User,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log catalog mutations and completed sales with who, what and when.

        Usage:
            AuditLog.log_action("create", "sale", 12, current_user, changes={"invoice": "INV-261019-0012"})
            AuditLog.log_action("delete", "product", 456, current_user, changes={"name": "milk"})
        """
        log_entry = {
            "timestamp": _timestamp(),
            "event_type": f"{resource_type}.{action}",
            "user_id": user.id,
            "user_email": user.email,
            "resource_id": resource_id,
        }

        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_access_denied(
        action: str,
        resource_type: str,
        user_id: int,
        reason: str,
    ):
        """
        Log denied access attempts, e.g. a cashier account trying to edit the catalog.

        Usage:
            AuditLog.log_access_denied("write", "product", 2, "Admin role required")
        """
        log_entry = {
            "timestamp": _timestamp(),
            "event_severity": "WARNING",
            "event_type": "access_denied",
            "action": action,
            "resource_type": resource_type,
            "user_id": user_id,
            "reason": reason,
        }

        audit_logger.warning(json.dumps(log_entry))
