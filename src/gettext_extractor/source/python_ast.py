"""
Python source host for the extraction engine.

This module parses Python files with :mod:`ast`, attaches comments collected
with :mod:`tokenize`, and feeds the resulting declarations and call-sites to
an :class:`~gettext_extractor.extraction.session.ExtractionSession`.

Usage Examples:
    Extract a single file:
        >>> session = ExtractionSession()
        >>> extract_file(session, Path("app/views.py"))
        3
        >>> session.catalog.default_context["Hello"].comments.reference
        'app/views.py:12'
"""

from __future__ import annotations

import ast
import io
import logging
import tokenize
from pathlib import Path
from typing import NamedTuple, override

from ..extraction.nodes import Argument, CallSite, Declaration, Declarator, Span
from ..extraction.session import ExtractionSession
from ..utils.core.exceptions import SourceParseError

logger = logging.getLogger(__name__)

_NON_CODE_TOKENS = {
    tokenize.COMMENT,
    tokenize.NL,
    tokenize.NEWLINE,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENCODING,
    tokenize.ENDMARKER,
}


class CommentMap:
    """
    Line-based comment attachment for a Python source file.

    A node's leading comments are the contiguous comment-only lines directly
    above it, provided the node is the first code token on its line.
    """

    def __init__(self, source: str) -> None:
        """
        Tokenize ``source`` and index its comments.

        Raises:
            tokenize.TokenError: If the source cannot be tokenized
        """
        self._comment_lines: dict[int, str] = {}
        self._first_code_col: dict[int, int] = {}

        for token in tokenize.generate_tokens(io.StringIO(source).readline):
            row, col = token.start
            if token.type == tokenize.COMMENT:
                if not token.line[:col].strip():
                    self._comment_lines[row] = token.string[1:]
            elif token.type not in _NON_CODE_TOKENS:
                _ = self._first_code_col.setdefault(row, col)

    def leading_comments(self, node: ast.expr | ast.stmt) -> tuple[str, ...]:
        """Return the comments attached above ``node``, in source order."""
        if self._first_code_col.get(node.lineno) != node.col_offset:
            return ()

        comments: list[str] = []
        line = node.lineno - 1
        while line in self._comment_lines:
            comments.append(self._comment_lines[line])
            line -= 1
        return tuple(reversed(comments))


def node_span(node: ast.expr) -> Span:
    """Structural span of an expression node."""
    return Span(
        node.lineno,
        node.col_offset,
        node.end_lineno if node.end_lineno is not None else node.lineno,
        node.end_col_offset if node.end_col_offset is not None else node.col_offset,
    )


class SourceNodes(NamedTuple):
    """Declarations and call-sites found in one source file."""

    declarations: list[Declaration]
    calls: list[CallSite]


class TranslationNodeCollector(ast.NodeVisitor):
    """AST visitor collecting variable declarations and call expressions."""

    def __init__(self, filename: str, comment_map: CommentMap) -> None:
        """
        Initialize the collector.

        Args:
            filename: Path used in references for this file
            comment_map: Comment index of the same source
        """
        self.filename: str = filename
        self.comment_map: CommentMap = comment_map
        self.declarations: list[Declaration] = []
        self.calls: list[CallSite] = []
        self._statements: list[ast.stmt] = []

    @override
    def visit(self, node: ast.AST) -> None:
        if isinstance(node, ast.stmt):
            self._statements.append(node)
            try:
                super().visit(node)
            finally:
                _ = self._statements.pop()
        else:
            super().visit(node)

    def visit_Assign(self, node: ast.Assign) -> None:
        self.declarations.append(
            Declaration(
                declarators=self._declarators(node.targets, node.value),
                comments=self.comment_map.leading_comments(node),
                filename=self.filename,
            )
        )
        self.generic_visit(node)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        init_span = node_span(node.value) if node.value is not None else None
        self.declarations.append(
            Declaration(
                declarators=(Declarator(init_span),),
                comments=self.comment_map.leading_comments(node),
                filename=self.filename,
            )
        )
        self.generic_visit(node)

    def visit_Call(self, node: ast.Call) -> None:
        name: str | None = None
        property_name: str | None = None
        if isinstance(node.func, ast.Name):
            name = node.func.id
        elif isinstance(node.func, ast.Attribute):
            property_name = node.func.attr

        arguments: list[Argument] = []
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                # Positions after an unpacked argument are unknown
                break
            value: object = arg.value if isinstance(arg, ast.Constant) else None  # pyright: ignore[reportAny]
            arguments.append(Argument(value if isinstance(value, str) else None))

        statement_comments: tuple[str, ...] = ()
        if self._statements:
            statement_comments = self.comment_map.leading_comments(self._statements[-1])

        self.calls.append(
            CallSite(
                filename=self.filename,
                line=node.lineno,
                span=node_span(node),
                name=name,
                property_name=property_name,
                arguments=tuple(arguments),
                comments=self.comment_map.leading_comments(node),
                statement_comments=statement_comments,
            )
        )
        self.generic_visit(node)

    def _declarators(
        self, targets: list[ast.expr], value: ast.expr
    ) -> tuple[Declarator, ...]:
        """Split ``a, b = x, y`` into one declarator per element."""
        if (
            len(targets) == 1
            and isinstance(targets[0], (ast.Tuple, ast.List))
            and isinstance(value, (ast.Tuple, ast.List))
            and len(targets[0].elts) == len(value.elts)
            and not any(isinstance(elt, ast.Starred) for elt in value.elts)
        ):
            return tuple(
                Declarator(node_span(elt), self.comment_map.leading_comments(elt))
                for elt in value.elts
            )
        return (Declarator(node_span(value)),)


def collect_nodes(source: str, filename: str) -> SourceNodes:
    """
    Parse Python source into declarations and call-sites.

    Args:
        source: Python source text
        filename: Path used in references

    Returns:
        SourceNodes in source order

    Raises:
        SourceParseError: If the source has invalid syntax
    """
    try:
        tree = ast.parse(source, filename=filename)
        comment_map = CommentMap(source)
    except (SyntaxError, tokenize.TokenError) as e:
        raise SourceParseError(
            f"Cannot parse {filename}: {e}",
            user_message=f"Syntax error in {filename}",
            context=filename,
        ) from e

    collector = TranslationNodeCollector(filename, comment_map)
    collector.visit(tree)
    return SourceNodes(collector.declarations, collector.calls)


def extract_source(session: ExtractionSession, source: str, filename: str) -> int:
    """
    Feed one source text to the session: declarations first, then calls.

    Args:
        session: Session receiving the nodes
        source: Python source text
        filename: Path used in references

    Returns:
        Number of call-sites that matched a translation function

    Raises:
        SourceParseError: If the source has invalid syntax
        InvalidPluralFormsError: Propagated from the session
    """
    nodes = collect_nodes(source, filename)

    for declaration in nodes.declarations:
        _ = session.process_declaration(declaration)

    matched = 0
    for call in nodes.calls:
        if session.process_call(call) is not None:
            matched += 1
    return matched


def extract_file(
    session: ExtractionSession, filepath: Path, filename: str | None = None
) -> int:
    """
    Extract translation calls from a single Python file.

    Args:
        session: Session receiving the nodes
        filepath: Path to the Python file
        filename: Path used in references (defaults to ``filepath``)

    Returns:
        Number of matched translation call-sites

    Raises:
        SourceParseError: If the file cannot be read or parsed
    """
    try:
        source = filepath.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceParseError(
            f"Cannot read {filepath}: {e}",
            user_message=f"Cannot read {filepath}",
            context=str(filepath),
        ) from e

    matched = extract_source(session, source, filename or filepath.as_posix())
    logger.debug(f"Extracted {matched} translation call(s) from {filepath}")
    return matched
