"""
Extraction session: the state of one traversal.

The session owns the active catalog, the current target file name and the
alias relocation table. A host traversal feeds it declarations and
call-sites in source order; listeners are told after every processed
call-site so a writer can decide how often to serialize.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from pathlib import Path

from ..config.schema import ExtractorConfig
from .catalog import Catalog, Comments, Entry, MergeOutcome
from .comments import AliasRelocationTable, resolve_translator_comment
from .nodes import CallSite, Declaration
from .signatures import NON_ENTRY_ROLES, SignatureMatch, SignatureRegistry

logger = logging.getLogger(__name__)

ChangeCallback = Callable[["ExtractionSession", MergeOutcome], None]


def resolve_base_directory(base_directory: str | None) -> str | None:
    """
    Turn the configured base directory into a path prefix.

    Args:
        base_directory: Configured value; ``.`` means the working directory

    Returns:
        Prefix ending in exactly one ``/``, or None when unset
    """
    if not base_directory:
        return None
    if base_directory == ".":
        return f"{Path.cwd()}/"
    return base_directory.rstrip("/") + "/"


class ExtractionSession:
    """
    Accumulates a translation catalog across one source traversal.

    Changing the configured ``file_name`` starts a fresh catalog with freshly
    defaulted headers; the relocation table lives for the whole session.
    """

    def __init__(self, config: ExtractorConfig | None = None) -> None:
        """
        Initialize the session.

        Args:
            config: Extraction configuration (defaults when omitted)

        Raises:
            InvalidPluralFormsError: If the configured Plural-Forms is unparseable
        """
        config = config or ExtractorConfig()
        self._config: ExtractorConfig = config
        self._registry: SignatureRegistry = SignatureRegistry(config.function_names)
        self._catalog: Catalog = self._start_catalog(config)
        self._file_name: str = config.file_name
        self._relocations: AliasRelocationTable = AliasRelocationTable()
        self._change_callbacks: list[ChangeCallback] = []

    @property
    def config(self) -> ExtractorConfig:
        return self._config

    @property
    def file_name(self) -> str:
        return self._file_name

    @property
    def catalog(self) -> Catalog:
        """The live catalog for the current file name."""
        return self._catalog

    @property
    def registry(self) -> SignatureRegistry:
        return self._registry

    @property
    def relocations(self) -> AliasRelocationTable:
        return self._relocations

    def configure(self, config: ExtractorConfig) -> None:
        """
        Apply a configuration, starting a new catalog if the file name changed.

        Args:
            config: New extraction configuration

        Raises:
            InvalidPluralFormsError: If a new catalog is needed and its
                Plural-Forms header is unparseable
        """
        self._config = config
        self._registry = SignatureRegistry(config.function_names)

        if config.file_name != self._file_name:
            self._catalog = self._start_catalog(config)
            self._file_name = config.file_name

    def _start_catalog(self, config: ExtractorConfig) -> Catalog:
        catalog = Catalog(config.headers)
        logger.debug(
            f"Started catalog for {config.file_name} (nplurals={catalog.nplurals})"
        )
        return catalog

    def register_change_callback(self, callback: ChangeCallback) -> None:
        """
        Register a callback run after every processed call-site.

        Args:
            callback: Function called with (session, outcome)
        """
        if callback not in self._change_callbacks:
            self._change_callbacks.append(callback)

    def unregister_change_callback(self, callback: ChangeCallback) -> None:
        """Remove a previously registered callback."""
        if callback in self._change_callbacks:
            self._change_callbacks.remove(callback)

    def process_declaration(self, declaration: Declaration) -> int:
        """
        Record relocated translator comments for a variable declaration.

        Returns:
            Number of relocation entries recorded
        """
        return self._relocations.record_declaration(declaration)

    def process_call(self, call: CallSite) -> MergeOutcome | None:
        """
        Extract a call-site into the active catalog.

        Args:
            call: Call-site to process

        Returns:
            The merge outcome, or None if the callee is not a translation
            function
        """
        match = self._registry.match(call)
        if match is None:
            return None

        entry = self.extract_entry(call, match)
        outcome = self.catalog.add(entry)

        match outcome:
            case MergeOutcome.DISCARDED:
                logger.debug(
                    f"Skipped {match.name}() at {entry.comments.reference}: no literal msgid"
                )
            case _:
                logger.debug(
                    f"{outcome.value.capitalize()} {entry.msgid!r} from {entry.comments.reference}"
                )

        for callback in list(self._change_callbacks):
            callback(self, outcome)

        return outcome

    def extract_entry(self, call: CallSite, match: SignatureMatch) -> Entry:
        """
        Build a candidate entry from a matched call-site.

        Args:
            call: Matched call-site
            match: Signature the call-site matched

        Returns:
            Candidate entry; ``msgid`` is None when no literal msgid was found
        """
        fields: dict[str, str] = {}
        msgstr: list[str] = []

        for role, argument in zip(match.roles, call.arguments):
            if role is None or role in NON_ENTRY_ROLES:
                continue

            value = argument.value
            if value:
                fields[role] = str(value)

            if role == "msgid_plural":
                msgstr = [""] * self.catalog.nplurals

        comments = Comments(reference=self.make_reference(call.filename, call.line))
        translator_comment = resolve_translator_comment(call, self._relocations)
        if translator_comment:
            comments.translator = translator_comment

        return Entry(
            msgid=fields.get("msgid"),
            msgid_plural=fields.get("msgid_plural"),
            msgctxt=fields.get("msgctxt"),
            msgstr=msgstr,
            comments=comments,
        )

    def make_reference(self, filename: str, line: int) -> str:
        """Format ``path:line`` with the base directory prefix stripped."""
        base = resolve_base_directory(self._config.base_directory)
        if base and filename.startswith(base):
            filename = filename[len(base) :]
        return f"{filename}:{line}"

    def snapshot(self) -> Catalog:
        """Return a deep copy of the current catalog for serialization."""
        return copy.deepcopy(self.catalog)
