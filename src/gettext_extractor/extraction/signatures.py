"""
Call-signature registry for translation lookup functions.

A signature maps a function name to the ordered semantic roles of its
positional arguments. Matching a call-site against the registry is a plain
lookup on the callee's direct name, then on its member property name.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Final, Literal, NamedTuple, final

from .nodes import CallSite

logger = logging.getLogger(__name__)

Role = Literal["domain", "msgctxt", "msgid", "msgid_plural", "count"]

ROLES: Final[frozenset[str]] = frozenset(
    {"domain", "msgctxt", "msgid", "msgid_plural", "count"}
)

# Roles that steer behaviour elsewhere and never become entry fields
NON_ENTRY_ROLES: Final[frozenset[str]] = frozenset({"domain", "count"})

DEFAULT_FUNCTION_NAMES: Final[Mapping[str, tuple[Role, ...]]] = {
    "gettext": ("msgid",),
    "dgettext": ("domain", "msgid"),
    "ngettext": ("msgid", "msgid_plural", "count"),
    "dngettext": ("domain", "msgid", "msgid_plural", "count"),
    "pgettext": ("msgctxt", "msgid"),
    "dpgettext": ("domain", "msgctxt", "msgid"),
    "npgettext": ("msgctxt", "msgid", "msgid_plural", "count"),
    "dnpgettext": ("domain", "msgctxt", "msgid", "msgid_plural", "count"),
}


class SignatureMatch(NamedTuple):
    """Result of matching a call-site against the registry."""

    name: str
    roles: tuple[str | None, ...]
    via_property: bool


@final
class SignatureRegistry:
    """Lookup table from function name to argument roles."""

    def __init__(
        self, function_names: Mapping[str, Sequence[str | None]] | None = None
    ) -> None:
        """
        Initialize the registry.

        Args:
            function_names: Mapping of function name to role list; the eight
                standard gettext functions are used when omitted
        """
        source = DEFAULT_FUNCTION_NAMES if function_names is None else function_names
        self._signatures: dict[str, tuple[str | None, ...]] = {}
        for name, roles in source.items():
            unknown = [role for role in roles if role is not None and role not in ROLES]
            if unknown:
                raise ValueError(
                    f"Unknown argument role(s) {unknown} for function '{name}'"
                )
            self._signatures[name] = tuple(roles)

    def __contains__(self, name: object) -> bool:
        return name in self._signatures

    def __iter__(self) -> Iterator[str]:
        return iter(self._signatures)

    def __len__(self) -> int:
        return len(self._signatures)

    def get(self, name: str) -> tuple[str | None, ...] | None:
        """Return the roles registered for ``name``, if any."""
        return self._signatures.get(name)

    def match(self, call: CallSite) -> SignatureMatch | None:
        """
        Match a call-site by direct callee name, then by property name.

        Args:
            call: Call-site to examine

        Returns:
            SignatureMatch on success, None when the call is not a
            translation call
        """
        if call.name is not None and call.name in self._signatures:
            return SignatureMatch(call.name, self._signatures[call.name], False)

        if call.property_name is not None and call.property_name in self._signatures:
            return SignatureMatch(
                call.property_name, self._signatures[call.property_name], True
            )

        return None
