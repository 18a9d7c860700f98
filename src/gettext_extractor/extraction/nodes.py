"""
Syntax-tree node shapes consumed by the extraction engine.

A host traversal (see ``gettext_extractor.source.python_ast``) turns a parsed
source file into these objects and feeds them to an ``ExtractionSession``.
Keeping them host-neutral lets the engine be exercised without any parser.
"""

from __future__ import annotations

from typing import NamedTuple


class Span(NamedTuple):
    """Structural span of an expression: start and end positions."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int


class Argument(NamedTuple):
    """One positional call argument; ``value`` is set only for literals."""

    value: object | None = None


class CallSite(NamedTuple):
    """A call expression as seen by the extraction engine."""

    filename: str
    line: int
    span: Span
    name: str | None = None
    property_name: str | None = None
    arguments: tuple[Argument, ...] = ()
    comments: tuple[str, ...] = ()
    statement_comments: tuple[str, ...] = ()


class Declarator(NamedTuple):
    """One binding inside a variable declaration."""

    init_span: Span | None
    comments: tuple[str, ...] = ()


class Declaration(NamedTuple):
    """A variable declaration with its leading comments and declarators."""

    declarators: tuple[Declarator, ...]
    comments: tuple[str, ...] = ()
    filename: str = ""
