"""
Error handling utilities for consistent error message extraction.
"""


def get_error_message(error: BaseException | object) -> str:
    """
    Safely extract an error message from an unknown error type.

    Falls back to the exception class name when the message is empty.
    """
    if isinstance(error, Exception):
        return str(error) or type(error).__name__
    return "Unknown error"
