from typing import Any, Dict, List, Optional

from fastapi import status
from fastapi.responses import JSONResponse


class ApplicationException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        detail_message: Optional[str] = None,
        details: Optional[List[str]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail_message = detail_message
        self.details = details
        self.extra = extra or {}

    def to_content(self) -> Dict[str, Any]:
        content: Dict[str, Any] = {"error": self.message}
        if self.detail_message:
            content["message"] = self.detail_message
        if self.details:
            content["details"] = self.details
        content.update(self.extra)
        return content

    def to_response(self):
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_content()
        )


class NotFoundError(ApplicationException):
    def __init__(self, message: str = "User not found", **kwargs):
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, **kwargs)


class ValidationFailure(ApplicationException):
    def __init__(self, message: str, detail_message: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            detail_message=detail_message,
            **kwargs
        )


class InvalidFormat(ValidationFailure):
    def __init__(self, example: str):
        super().__init__(
            "Invalid timestamp format",
            detail_message=f"Please use ISO 8601 format (e.g., {example})"
        )


class InvalidBedTime(ValidationFailure):
    def __init__(self, detail_message: str):
        super().__init__("Invalid bedtime", detail_message=detail_message)


class InvalidWakeTime(ValidationFailure):
    def __init__(self, detail_message: str):
        super().__init__("Invalid wake up time", detail_message=detail_message)


class StateConflict(ApplicationException):
    def __init__(self, message: str, **kwargs):
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, **kwargs)


class ActiveSessionExists(StateConflict):
    def __init__(self, session_id: int, go_to_bed_at: str):
        super().__init__(
            "User already has an active sleep session",
            extra={"active_session": {"id": session_id, "go_to_bed_at": go_to_bed_at}}
        )
        self.session_id = session_id


class NoActiveSession(StateConflict):
    def __init__(self):
        super().__init__(
            "No active sleep session found",
            detail_message="User needs to clock in first"
        )


class SelfFollowError(StateConflict):
    def __init__(self):
        super().__init__("You cannot follow yourself")


class PersistenceFailure(ApplicationException):
    def __init__(self, message: str, details: Optional[List[str]] = None):
        super().__init__(
            message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details or []
        )
