"""
Standardized exception hierarchy for studytrack
Provides rich context, consistent logging, and user-friendly error messages
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any
from uuid import uuid4
import logging

logger = logging.getLogger(__name__)


class StudyTrackError(Exception):
    """
    Base exception for all studytrack errors

    Provides:
    - Automatic timestamping
    - Request ID for tracing
    - User-friendly messages
    - Structured context
    - Automatic logging

    Example:
        raise StudyTrackError(
            message="Failed to load streak record",
            operation="load_streak",
            context={"key": "studyStreak"}
        )
    """

    def __init__(
        self,
        message: str,
        request_id: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.request_id = request_id or str(uuid4())
        self.operation = operation
        self.context = context or {}
        self.cause = cause
        self.user_message = user_message or "An error occurred. Please try again."
        self.timestamp = datetime.now(timezone.utc)

        # Auto-log on creation
        self._log_error()

    def _log_error(self) -> None:
        """Log error with full context"""
        log_data = {
            "error_type": self.__class__.__name__,
            "error_message": self.message,  # Avoid conflict with logging's 'message' field
            "request_id": self.request_id,
            "operation": self.operation,
            "error_context": self.context,
            "timestamp": self.timestamp.isoformat()
        }

        if self.cause:
            log_data["cause"] = str(self.cause)
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data, exc_info=self.cause)
        else:
            logger.error(f"{self.__class__.__name__}: {self.message}", extra=log_data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize exception for callers that report errors as data"""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "user_message": self.user_message,
            "request_id": self.request_id,
            "timestamp": self.timestamp.isoformat()
        }


# ==========================================
# Validation Errors (Caller Input)
# ==========================================

class ValidationError(StudyTrackError):
    """
    Raised when caller input fails validation

    Examples:
    - Non-numeric XP amount
    - Negative or fractional XP amount
    - Malformed ISO date

    Example:
        raise ValidationError(
            message="Amount must be a finite number",
            field="amount",
            value="abc"
        )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=message,
            user_message=f"Invalid {field}: {message}" if field else message,
            context={"field": field, "value": repr(value)},
            **kwargs
        )


# ==========================================
# Storage Errors
# ==========================================

class StorageError(StudyTrackError):
    """
    Base class for persistence-related errors
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        **kwargs
    ):
        self.key = key
        kwargs.setdefault("user_message", "We had trouble accessing your saved progress.")
        kwargs.setdefault("context", {"key": key})
        super().__init__(message=message, **kwargs)


class MalformedStateError(StorageError):
    """Stored record could not be parsed; callers recover with a fresh state"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            key=key,
            user_message="Your saved progress was unreadable and has been reset.",
            **kwargs
        )


class StorageWriteError(StorageError):
    """Record could not be written; in-memory state stays authoritative"""

    def __init__(self, message: str, key: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            key=key,
            user_message="Your progress could not be saved. It will be kept for this session.",
            **kwargs
        )


# ==========================================
# Configuration Errors
# ==========================================

class ConfigurationError(StudyTrackError):
    """System configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            user_message="studytrack is not properly configured. Check your environment settings.",
            context={"config_key": config_key},
            **kwargs
        )
