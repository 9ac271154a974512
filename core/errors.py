from typing import Optional, Dict, Any


class InterviewAppError(Exception):
    """
    Base error for the interview feedback service.

    Attributes:
        code (str): short error code, e.g. 'COMPLETION_FAILED'
        message (str): human readable message
        details (dict): extra debugging context
    """
    code = "APP_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(f"[{self.code}] {message}")


class ConfigurationError(InterviewAppError):
    """Raised when a collaborator cannot be built from the environment"""
    code = "CONFIG_ERROR"


class CompletionFailure(InterviewAppError):
    """The structured completion call errored or returned non-conformant data"""
    code = "COMPLETION_FAILED"


class StoreReadFailure(InterviewAppError):
    """A document store get or query failed"""
    code = "STORE_READ_FAILED"


class StoreWriteFailure(InterviewAppError):
    """A document store set failed"""
    code = "STORE_WRITE_FAILED"
