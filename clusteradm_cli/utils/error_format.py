"""Safe error message formatting utilities.

Ensures exceptions always have useful display messages, even when
their str() representation is empty (e.g., TimeoutError).
"""

from __future__ import annotations

from rich.markup import escape as _escape_markup

# Friendly messages for exception types known to have empty str()
FRIENDLY_MESSAGES: dict[type, str] = {
    TimeoutError: "Request timed out. This may indicate network issues or a slow GitHub API response.",
    ConnectionResetError: "Connection was reset by the server.",
    KeyboardInterrupt: "Operation interrupted by user.",
}


def format_error_message(e: BaseException, *, include_type: bool = True, include_cause: bool = False) -> str:
    """Format an exception into a useful display message.

    Args:
        e: The exception to format
        include_type: Whether to include the exception type name
        include_cause: Whether to append the chained cause (``raise ... from``)

    Returns:
        A non-empty, user-friendly error message

    Examples:
        >>> format_error_message(ValueError("invalid input"))
        'ValueError: invalid input'

        >>> format_error_message(ValueError("invalid input"), include_type=False)
        'invalid input'
    """
    error_str = str(e)
    error_type = type(e).__name__

    if error_str:
        message = error_str
        if include_type and error_type not in error_str:
            message = f"{error_type}: {error_str}"
    else:
        for exc_type, friendly_msg in FRIENDLY_MESSAGES.items():
            if isinstance(e, exc_type):
                message = f"{error_type}: {friendly_msg}"
                break
        else:
            message = f"{error_type}: (no additional details)"

    cause = e.__cause__
    if include_cause and cause is not None and str(cause) not in message:
        message = f"{message}\n  caused by: {format_error_message(cause)}"
    return message


def escape_markup(value: object) -> str:
    """Escape a value for safe interpolation into Rich markup strings.

    Repository paths like ``{owner}/{repo}`` or ``[::1]`` hosts would
    otherwise be read as markup.
    """
    return _escape_markup(str(value))
