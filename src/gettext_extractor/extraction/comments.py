"""
Translator comment resolution.

Developers annotate translation calls with comments such as
``# Translators: shown on the login button``. This module recognizes those
comments and keeps the relocation table used for annotations written on a
declaration instead of on the call itself.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Final, final

from .nodes import CallSite, Declaration, Span

logger = logging.getLogger(__name__)

TRANSLATOR_COMMENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*translators:\s*(.*?)\s*$", re.IGNORECASE | re.MULTILINE
)


def get_translator_comment(comments: Iterable[str]) -> str | None:
    """
    Collect translator annotations from a node's leading comments.

    Args:
        comments: Leading comment texts, in source order

    Returns:
        Annotation bodies joined by newlines, or None if no comment qualifies
    """
    found: list[str] = []
    for comment in comments:
        match = TRANSLATOR_COMMENT_PATTERN.search(comment)
        if match:
            found.append(match.group(1))
    return "\n".join(found) if found else None


@final
class AliasRelocationTable:
    """
    Annotations recorded against initializer spans of declarations.

    An annotation written above ``label = gettext("Save")`` belongs to the
    declaration. Recording it under the initializer's span lets the call-site
    recover it when that exact expression is visited. Entries are keyed by
    file and span, and lookups only succeed for the identical pair; later
    references to the bound name get nothing.
    """

    def __init__(self) -> None:
        self._comments: dict[tuple[str, Span], str] = {}

    def __len__(self) -> int:
        return len(self._comments)

    def record_declaration(self, declaration: Declaration) -> int:
        """
        Relocate a declaration's annotation to its unannotated declarators.

        Args:
            declaration: Declaration node to examine

        Returns:
            Number of relocation entries recorded
        """
        translator_comment = get_translator_comment(declaration.comments)
        if not translator_comment:
            return 0

        recorded = 0
        for declarator in declaration.declarators:
            if declarator.init_span is None:
                continue
            if get_translator_comment(declarator.comments):
                continue
            key = (declaration.filename, declarator.init_span)
            self._comments[key] = translator_comment
            recorded += 1

        if recorded:
            logger.debug(f"Relocated translator comment to {recorded} declarator(s)")
        return recorded

    def lookup(self, filename: str, span: Span) -> str | None:
        """Return the annotation recorded for exactly ``span`` in ``filename``."""
        return self._comments.get((filename, span))


def resolve_translator_comment(
    call: CallSite, relocations: AliasRelocationTable
) -> str | None:
    """
    Resolve the annotation for a call-site, first match wins.

    Order: the call's own leading comments, the enclosing statement's
    leading comments, then a relocated declaration annotation.

    Args:
        call: Call-site being extracted
        relocations: Relocation table of the current session

    Returns:
        The annotation text, or None
    """
    return (
        get_translator_comment(call.comments)
        or get_translator_comment(call.statement_comments)
        or relocations.lookup(call.filename, call.span)
    )
