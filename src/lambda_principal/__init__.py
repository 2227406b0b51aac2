"""lambda-principal -- the validated user behind a request.

Exposes the Principal value object used by authorization code to answer
role-membership checks, its construction errors, and logging helpers.
"""

from lambda_principal.exceptions import (
    InvalidRolesError,
    InvalidRolesFieldError,
    InvalidUserDataError,
    InvalidUsernameError,
    PrincipalError,
)
from lambda_principal.logging import (
    LoggingSettings,
    PrincipalProcessor,
    configure_logging,
    get_logger,
)
from lambda_principal.principal import RESERVED_KEYWORDS, Principal

__all__ = [
    "RESERVED_KEYWORDS",
    "InvalidRolesError",
    "InvalidRolesFieldError",
    "InvalidUserDataError",
    "InvalidUsernameError",
    "LoggingSettings",
    "Principal",
    "PrincipalError",
    "PrincipalProcessor",
    "configure_logging",
    "get_logger",
]
