from .errors import (
    ApplicationException,
    NotFoundError,
    ValidationFailure,
    InvalidFormat,
    InvalidBedTime,
    InvalidWakeTime,
    StateConflict,
    ActiveSessionExists,
    NoActiveSession,
    SelfFollowError,
    PersistenceFailure,
)

__all__ = [
    "ApplicationException",
    "NotFoundError",
    "ValidationFailure",
    "InvalidFormat",
    "InvalidBedTime",
    "InvalidWakeTime",
    "StateConflict",
    "ActiveSessionExists",
    "NoActiveSession",
    "SelfFollowError",
    "PersistenceFailure",
]
