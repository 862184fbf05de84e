"""
Exception hierarchy for ergo-kb.

Defines all exception types with error codes and correlation IDs.

License: MIT
"""

import uuid
from typing import Any, Dict, Optional


class ErgoKBError(Exception):
    """
    Base exception for all ergo-kb errors.

    Provides standard error attributes: message, error_code, details,
    correlation_id.

    Attributes:
        message: Human-readable error message
        error_code: Programmatic error code (e.g., "VAL_001")
        details: Additional context (dict)
        correlation_id: UUID for tracing across layers
        original_exception: Wrapped exception (if any)

    Example:
        raise ErgoKBError(
            message="Operation failed",
            error_code="ERR_UNKNOWN",
            details={"path": "kb.json"},
        )
    """

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with all error information
        """
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "correlation_id": self.correlation_id,
            "original_error": str(self.original_exception) if self.original_exception else None,
        }


class ValidationError(ErgoKBError):
    """
    Raised when knowledge-base content or user input is invalid.

    Error Codes:
        VAL_001: Missing required field
        VAL_002: Invalid field type
        VAL_003: Duplicate chunk id
        VAL_004: Invalid path or unsupported format
        VAL_005: Missing required section
    """

    def __init__(self, message: str, error_code: str = "VAL_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)


class NotFoundError(ErgoKBError):
    """
    Raised when a lookup key does not match any chunk.

    Error Codes:
        NF_001: Chunk id not present in the index
    """

    def __init__(self, message: str, error_code: str = "NF_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)


class ProcessingError(ErgoKBError):
    """
    Raised when a source file cannot be read or parsed.

    Error Codes:
        PROC_001: File could not be read
        PROC_002: Text extraction failed
        PROC_003: Syntax error in source document
    """

    def __init__(self, message: str, error_code: str = "PROC_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)


class ParityError(ValidationError):
    """
    Raised when two serializations of the knowledge base disagree.

    Error Codes:
        PAR_001: Content parity check failed
    """

    def __init__(self, message: str, error_code: str = "PAR_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
