"""
Catalog header defaults and plural-rule resolution.

The number of msgstr slots a plural entry needs is read from the
``Plural-Forms`` header of the active catalog.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Final

from ..utils.core.exceptions import InvalidPluralFormsError

CONTENT_TYPE: Final[str] = "Content-Type"
PLURAL_FORMS: Final[str] = "Plural-Forms"

DEFAULT_HEADERS: Final[Mapping[str, str]] = {
    CONTENT_TYPE: "text/plain; charset=UTF-8",
    PLURAL_FORMS: "nplurals = 2; plural = (n !== 1);",
}

# Canonical spelling of the standard gettext header fields
_KNOWN_HEADERS: Final[dict[str, str]] = {
    name.lower(): name
    for name in (
        "Project-Id-Version",
        "Report-Msgid-Bugs-To",
        "POT-Creation-Date",
        "PO-Revision-Date",
        "Last-Translator",
        "Language-Team",
        "Language",
        "MIME-Version",
        CONTENT_TYPE,
        "Content-Transfer-Encoding",
        PLURAL_FORMS,
        "X-Generator",
    )
}

_NPLURALS_PATTERN: Final[re.Pattern[str]] = re.compile(r"nplurals\s*=\s*(\d)")


def normalize_header_key(key: str) -> str:
    """
    Return the canonical spelling of a header key.

    Args:
        key: Header key in any casing, e.g. ``content-type``

    Returns:
        Canonical key such as ``Content-Type``; unknown keys are title-cased
        per dash-separated part
    """
    stripped = key.strip()
    known = _KNOWN_HEADERS.get(stripped.lower())
    if known is not None:
        return known
    return "-".join(part.capitalize() for part in stripped.split("-"))


def build_headers(overrides: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Build a catalog header set with defaults for the required keys.

    Args:
        overrides: Configured headers; missing required keys are defaulted

    Returns:
        New header dictionary with canonical keys
    """
    headers: dict[str, str] = {}
    for key, value in (overrides or {}).items():
        headers[normalize_header_key(key)] = value

    for key, value in DEFAULT_HEADERS.items():
        if not headers.get(key):
            headers[key] = value

    return headers


def parse_nplurals(plural_forms: str) -> int:
    """
    Read the number of plural forms from a Plural-Forms expression.

    Args:
        plural_forms: Header value, e.g. ``nplurals=2; plural=(n != 1);``

    Returns:
        The single-digit nplurals value

    Raises:
        InvalidPluralFormsError: If the expression has no ``nplurals = <digit>``
    """
    match = _NPLURALS_PATTERN.search(plural_forms)
    if match is None:
        raise InvalidPluralFormsError(plural_forms)
    return int(match.group(1))
