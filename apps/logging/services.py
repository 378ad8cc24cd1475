import logging
import traceback
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import transaction

from .models import ErrorLog, SystemLog

User = get_user_model()
logger = logging.getLogger(__name__)


def _resource_fields(resource: Any) -> Dict[str, str]:
    if resource is None:
        return {"resource_type": "", "resource_id": ""}
    return {
        "resource_type": resource._meta.label,
        "resource_id": str(resource.pk),
    }


def _authenticated(user: Any) -> Optional[User]:
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    return user


class LoggerService:
    """
    Persists operational events next to the module loggers.

    Writing a log row never breaks the caller: persistence failures are
    reported through the ``apps.logging.services`` logger and swallowed.
    """

    @staticmethod
    @transaction.atomic
    def log_info(
        action: str,
        user: Optional[User] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        resource: Any = None,
        action_type: str = "crud_operation",
    ):
        try:
            SystemLog.objects.create(
                level="INFO",
                action=action,
                action_type=action_type,
                message=f"Action: {action}",
                user=_authenticated(user),
                ip_address=ip_address,
                metadata=details or {},
                **_resource_fields(resource),
            )
        except Exception as e:
            logger.error(f"Failed to log info: {str(e)}")

    @staticmethod
    @transaction.atomic
    def log_warning(
        action: str,
        user: Optional[User] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        resource: Any = None,
    ):
        try:
            SystemLog.objects.create(
                level="WARNING",
                action=action,
                action_type="system_event",
                message=f"Warning: {action}",
                user=_authenticated(user),
                ip_address=ip_address,
                metadata=details or {},
                **_resource_fields(resource),
            )
        except Exception as e:
            logger.error(f"Failed to log warning: {str(e)}")

    @staticmethod
    @transaction.atomic
    def log_error(
        action: str,
        error: str,
        user: Optional[User] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        resource: Any = None,
        severity: str = "medium",
    ):
        try:
            stack_trace = traceback.format_exc()
            if stack_trace.startswith("NoneType: None"):
                stack_trace = ""

            SystemLog.objects.create(
                level="ERROR",
                action=action,
                action_type="error",
                message=f"Error in {action}: {error}",
                user=_authenticated(user),
                ip_address=ip_address,
                metadata=details or {},
                stack_trace=stack_trace,
                **_resource_fields(resource),
            )

            ErrorLog.objects.create(
                error_type=action,
                error_message=error,
                stack_trace=stack_trace,
                user=_authenticated(user),
                ip_address=ip_address,
                request_data=details or {},
                severity=severity,
            )
        except Exception as e:
            logger.error(f"Failed to log error: {str(e)}")

    @staticmethod
    @transaction.atomic
    def log_security_event(
        action: str,
        user: Optional[User] = None,
        ip_address: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        resource: Any = None,
    ):
        try:
            SystemLog.objects.create(
                level="WARNING",
                action=action,
                action_type="security_event",
                message=f"Security event: {action}",
                user=_authenticated(user),
                ip_address=ip_address,
                metadata=details or {},
                **_resource_fields(resource),
            )
        except Exception as e:
            logger.error(f"Failed to log security event: {str(e)}")


def get_client_ip(request) -> Optional[str]:
    """Extract client IP address from request headers."""
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")
