"""Exception hierarchy for the WalGraph engine."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class WalGraphError(Exception):
    """Base exception for all WalGraph errors.

    Attributes:
        message: Human-readable error message
        details: Additional structured context for logging and results
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for structured output."""
        return {
            "error": self.message,
            "error_type": self.__class__.__name__,
            "details": self.details,
        }


class ParseError(WalGraphError):
    """Exception raised when command text does not fit the grammar."""

    def __init__(self, message: str, text: Optional[str] = None):
        super().__init__(message, {"text": text} if text is not None else None)
        self.text = text


class GraphReferenceError(WalGraphError):
    """Exception raised when a node or relationship id does not exist."""

    def __init__(self, message: str, entity_id: Optional[str] = None):
        super().__init__(message, {"id": entity_id} if entity_id is not None else None)
        self.entity_id = entity_id


class ConstraintError(WalGraphError):
    """Exception raised when an operation would break a store invariant."""
    pass


class GraphValidationError(WalGraphError):
    """Exception raised when node or relationship data is invalid."""
    pass


class ExecutionError(WalGraphError):
    """Exception raised when a command batch stops on an error.

    Attributes:
        original_query: Full text of the batch that failed
        timestamp: ISO-8601 time at which the batch failed
        cause: The error raised by the failing command
    """

    def __init__(
        self,
        message: str,
        original_query: str,
        cause: Optional[WalGraphError] = None,
        timestamp: Optional[str] = None,
    ):
        super().__init__(
            message,
            {
                "original_query": original_query,
                "cause": cause.__class__.__name__ if cause else None,
            },
        )
        self.original_query = original_query
        self.cause = cause
        self.timestamp = timestamp or datetime.now(timezone.utc).isoformat()


class SnapshotStorageError(WalGraphError):
    """Exception raised when a snapshot collaborator fails to store or load."""

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"operation": operation, **(details or {})})
        self.operation = operation
