"""Exception hierarchy for principal construction failures.

Every error carries a machine-readable code and structured context so that
authorization middleware can log and map failures consistently. All errors
are raised synchronously while a Principal is being built; role queries never
raise.

Example:
    >>> from lambda_principal.exceptions import InvalidUsernameError
    >>> raise InvalidUsernameError(received=None)
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "InvalidRolesError",
    "InvalidRolesFieldError",
    "InvalidUserDataError",
    "InvalidUsernameError",
    "PrincipalError",
]


def _type_name(value: Any) -> str:
    return type(value).__name__


class PrincipalError(Exception):
    """Base class for all principal errors.

    Attributes:
        error_code: Machine-readable error code for client handling.
        message: Human-readable error description.
        context: Structured debugging information (argument positions, field names).

    Example:
        >>> raise PrincipalError("Construction failed", context={"argument": 1})
        PrincipalError: Construction failed (argument=1)
    """

    error_code: str = "PRINCIPAL_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize principal error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class InvalidUserDataError(PrincipalError):
    """Raised when the first construction argument is neither a string nor a mapping.

    Attributes:
        error_code: "INVALID_USER_DATA" (class constant).

    Example:
        >>> raise InvalidUserDataError(received=42)
        InvalidUserDataError: Invalid user data specified (arg #1). Must be a string
        or mapping. (argument=1, received_type=int)
    """

    error_code: str = "INVALID_USER_DATA"

    def __init__(self, received: Any) -> None:
        """Initialize invalid user data error.

        Args:
            received: The rejected value. Only its type name is kept.
        """
        message = "Invalid user data specified (arg #1). Must be a string or mapping."
        super().__init__(message, {"argument": 1, "received_type": _type_name(received)})


class InvalidRolesError(PrincipalError):
    """Raised when the positional roles argument is not a sequence.

    Attributes:
        error_code: "INVALID_ROLES" (class constant).
    """

    error_code: str = "INVALID_ROLES"

    def __init__(self, received: Any) -> None:
        message = "Invalid roles specified (arg #2)"
        super().__init__(message, {"argument": 2, "received_type": _type_name(received)})


class InvalidUsernameError(PrincipalError):
    """Raised when the resolved username is missing, not a string, or empty.

    Attributes:
        error_code: "INVALID_USERNAME" (class constant).
    """

    error_code: str = "INVALID_USERNAME"

    def __init__(self, received: Any) -> None:
        message = "User data does not define a valid username (user.username)"
        super().__init__(message, {"field": "username", "received_type": _type_name(received)})


class InvalidRolesFieldError(PrincipalError):
    """Raised when the resolved roles field is not a sequence.

    Attributes:
        error_code: "INVALID_ROLES_FIELD" (class constant).
    """

    error_code: str = "INVALID_ROLES_FIELD"

    def __init__(self, received: Any) -> None:
        message = "User data does not define valid roles (user.roles)"
        super().__init__(message, {"field": "roles", "received_type": _type_name(received)})
