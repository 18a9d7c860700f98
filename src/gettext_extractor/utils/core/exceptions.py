"""
Basic exception classes for gettext-extractor.

This module contains the exception hierarchy shared by the extraction engine,
the configuration layer and the command line, kept free of imports from the
rest of the package to avoid import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    CONFIGURATION = "configuration"
    SOURCE = "source"
    OUTPUT = "output"
    UNKNOWN = "unknown"


class ExtractorError(Exception):
    """Base exception class for gettext-extractor specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class ConfigurationError(ExtractorError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class InvalidPluralFormsError(ConfigurationError):
    """The Plural-Forms header does not declare a usable ``nplurals`` value."""

    code: str = "EInvalidPluralForms"

    def __init__(self, expression: str) -> None:
        super().__init__(
            f"{self.code}: cannot read nplurals from Plural-Forms header {expression!r}",
            user_message="The Plural-Forms header must contain 'nplurals = <digit>'",
            context=expression,
        )
        self.expression: str = expression


class SourceParseError(ExtractorError):
    """A source file could not be read or parsed."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.SOURCE,
            severity=ErrorSeverity.LOW,
            recoverable=True,
            user_message=user_message,
            context=context,
        )
