"""Structured error codes for letterbox tools.

Pure functions raise standard Python exceptions (FileNotFoundError, OSError,
ValueError) or the typed subclasses LockTimeout and DocumentDecodeError. The
FastMCP registration wrappers in each tool module catch these and return
structured error strings.

Error string format: "ERROR [{CODE}]: {message}"
"""
from enum import Enum


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    IO_ERROR = "IO_ERROR"
    LOCK_TIMEOUT = "LOCK_TIMEOUT"
    DECODE_ERROR = "DECODE_ERROR"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    NOT_CONFIGURED = "NOT_CONFIGURED"


# Bare names so tool modules can `from letterbox.errors import NOT_FOUND`.
NOT_FOUND = ErrorCode.NOT_FOUND
IO_ERROR = ErrorCode.IO_ERROR
LOCK_TIMEOUT = ErrorCode.LOCK_TIMEOUT
DECODE_ERROR = ErrorCode.DECODE_ERROR
INVALID_ARGUMENT = ErrorCode.INVALID_ARGUMENT
NOT_CONFIGURED = ErrorCode.NOT_CONFIGURED


def error(code: ErrorCode, message: str) -> str:
    """Format a structured error string for tool return values."""
    return f"ERROR [{code.value}]: {message}"
