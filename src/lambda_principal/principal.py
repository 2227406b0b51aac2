"""Principal value object representing the user behind a request.

Pure domain object with no I/O. Immutable (frozen dataclass). Built by
authorization middleware from an authenticated request context, then queried
with ``has_role`` to gate access.

Two construction forms are supported:

    >>> Principal.from_record({"username": "jdoe", "roles": ["admin"], "team": "ops"})
    >>> Principal.from_parts("jdoe", ["admin"], {"team": "ops"})

Both normalize their input into a single working record which is validated the
same way. Keys in the working record other than the reserved names become
extra attributes, readable through ``get_attribute`` or plain attribute access.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from lambda_principal.exceptions import (
    InvalidRolesError,
    InvalidRolesFieldError,
    InvalidUserDataError,
    InvalidUsernameError,
)
from lambda_principal.logging import get_logger

logger = get_logger(__name__)

# Names that extra attributes can never take over: the record keys and legacy
# accessor names, plus every public member of Principal.
RESERVED_KEYWORDS: frozenset[str] = frozenset(
    {
        "username",
        "_username",
        "roles",
        "_roles",
        "hasRole",
        "extras",
        "attributes",
        "has_role",
        "get_attribute",
        "to_record",
        "log_context",
        "from_record",
        "from_parts",
        "of",
    }
)

# Members looked up internally; never resolved through extra attributes.
_INTERNAL_NAMES = frozenset({"extras", "attributes"})


def _is_sequence(value: Any) -> bool:
    """Check for a list-like value. Strings and bytes do not count."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


@dataclass(frozen=True, slots=True)
class Principal:
    """Validated identity performing a request.

    Immutable after construction so it can be shared across threads and tasks
    without synchronization.

    Attributes:
        username: Non-empty identifier of the user.
        roles: Role strings in the order given, duplicates preserved.
        extras: Extra attributes, owned by the Principal. Never contains a
            reserved name. Hidden from ``repr`` since values may be sensitive.
            Read through ``attributes`` for a read-only view.
    """

    username: str
    roles: tuple[str, ...] = ()
    extras: dict[str, Any] = field(default_factory=dict, hash=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.username, str) or len(self.username) <= 0:
            raise InvalidUsernameError(received=self.username)
        if not _is_sequence(self.roles):
            raise InvalidRolesFieldError(received=self.roles)

        extras = {k: v for k, v in self.extras.items() if k not in RESERVED_KEYWORDS}
        object.__setattr__(self, "roles", tuple(self.roles))
        object.__setattr__(self, "extras", extras)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: fall through to extra attributes.
        if name.startswith("__") or name in _INTERNAL_NAMES:
            raise AttributeError(name)
        try:
            return self.extras[name]
        except KeyError:
            msg = f"{type(self).__name__!r} object has no attribute {name!r}"
            raise AttributeError(msg) from None

    @property
    def attributes(self) -> Mapping[str, Any]:
        """Read-only view of the extra attributes."""
        return MappingProxyType(self.extras)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Principal:
        """Build a Principal from a single mapping of user data.

        The mapping must define ``username`` and ``roles``; every other key
        becomes an extra attribute.

        Args:
            record: User data mapping. Read but never modified or retained.

        Returns:
            A validated Principal.

        Raises:
            InvalidUserDataError: If ``record`` is not a mapping.
            InvalidUsernameError: If ``username`` is missing, not a string, or empty.
            InvalidRolesFieldError: If ``roles`` is missing or not a sequence.
        """
        if not isinstance(record, Mapping):
            raise InvalidUserDataError(received=record)
        return cls._from_working_record(record)

    @classmethod
    def from_parts(
        cls,
        username: str,
        roles: Sequence[str],
        props: Mapping[str, Any] | None = None,
    ) -> Principal:
        """Build a Principal from a username, a roles sequence and optional extras.

        A ``props`` value that is not a mapping is treated as empty rather than
        rejected. ``props`` is deep-copied, so later changes to it by the caller
        are never observed.

        Args:
            username: Identifier of the user.
            roles: Roles held by the user.
            props: Optional extra attributes.

        Returns:
            A validated Principal.

        Raises:
            InvalidUserDataError: If ``username`` is not a string.
            InvalidRolesError: If ``roles`` is not a sequence.
            InvalidUsernameError: If ``username`` is empty.
        """
        if not isinstance(username, str):
            raise InvalidUserDataError(received=username)
        if not _is_sequence(roles):
            raise InvalidRolesError(received=roles)
        if not isinstance(props, Mapping):
            if props is not None:
                logger.debug("principal_props_ignored", props_type=type(props).__name__)
            props = {}

        record = copy.deepcopy(dict(props))
        record["username"] = username
        record["roles"] = roles
        return cls._from_working_record(record)

    @classmethod
    def of(
        cls,
        user: str | Mapping[str, Any],
        roles: Sequence[str] | None = None,
        props: Mapping[str, Any] | None = None,
    ) -> Principal:
        """Build a Principal from either construction form.

        A string ``user`` selects ``from_parts(user, roles, props)``; a mapping
        selects ``from_record(user)`` and ignores the other arguments.

        Raises:
            InvalidUserDataError: If ``user`` is neither a string nor a mapping.
        """
        if isinstance(user, str):
            return cls.from_parts(user, roles, props)  # type: ignore[arg-type]
        if not isinstance(user, Mapping):
            raise InvalidUserDataError(received=user)
        return cls.from_record(user)

    @classmethod
    def _from_working_record(cls, record: Mapping[str, Any]) -> Principal:
        return cls(
            username=record.get("username"),  # type: ignore[arg-type]
            roles=record.get("roles"),  # type: ignore[arg-type]
            extras={k: v for k, v in record.items() if k not in RESERVED_KEYWORDS},
        )

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return the extra attribute ``name``, or ``default`` if it is not set."""
        return self.extras.get(name, default)

    def has_role(self, roles: str | Sequence[str]) -> bool:
        """Check if the principal holds at least one of the given roles.

        Args:
            roles: A single role, or a sequence of acceptable roles.

        Returns:
            True if any queried role is held. False for no overlap, an empty
            query, or a query that is neither a string nor a sequence.
        """
        if isinstance(roles, str):
            roles = (roles,)
        if not _is_sequence(roles):
            return False
        return any(role in self.roles for role in roles)

    def to_record(self) -> dict[str, Any]:
        """Export the principal as a plain mapping accepted by ``from_record``."""
        return {
            **self.extras,
            "username": self.username,
            "roles": list(self.roles),
        }

    def log_context(self) -> dict[str, Any]:
        """Summary safe to put in a log event: attribute names, never values."""
        return {
            "username": self.username,
            "roles": list(self.roles),
            "attribute_names": sorted(str(k) for k in self.extras),
        }
