"""
Translation catalog model and merge algorithm.

A catalog holds entries grouped by message context. Adding an entry either
inserts it or merges its source reference into the existing entry with the
same msgid, then re-sorts the affected context so the catalog's order depends
only on the messages and references seen so far, never on traversal order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, final

from .plurals import PLURAL_FORMS, build_headers, parse_nplurals

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT: Final[str] = ""
DEFAULT_CHARSET: Final[str] = "UTF-8"


class MergeOutcome(Enum):
    """What happened to an entry handed to the catalog."""

    INSERTED = "inserted"
    MERGED = "merged"
    DISCARDED = "discarded"


@dataclass
class Comments:
    """Reference list and optional translator annotation of an entry."""

    reference: str
    translator: str | None = None

    @property
    def references(self) -> list[str]:
        """The individual ``path:line`` references."""
        return self.reference.split("\n") if self.reference else []


@dataclass
class Entry:
    """One catalog record."""

    msgid: str | None
    comments: Comments
    msgid_plural: str | None = None
    msgctxt: str | None = None
    msgstr: list[str] = field(default_factory=list)

    @property
    def is_plural(self) -> bool:
        return self.msgid_plural is not None or bool(self.msgstr)

    def to_dict(self) -> dict[str, object]:
        """Plain-dict view with optional fields omitted when unset."""
        data: dict[str, object] = {"msgid": self.msgid}
        if self.msgctxt is not None:
            data["msgctxt"] = self.msgctxt
        if self.msgid_plural is not None:
            data["msgid_plural"] = self.msgid_plural
        if self.msgstr:
            data["msgstr"] = list(self.msgstr)
        comments: dict[str, str] = {"reference": self.comments.reference}
        if self.comments.translator is not None:
            comments["translator"] = self.comments.translator
        data["comments"] = comments
        return data


def merge_reference(current: str, new_reference: str) -> str:
    """
    Add a reference to a newline-joined reference list.

    Args:
        current: Existing newline-joined references
        new_reference: ``path:line`` reference to add

    Returns:
        Deduplicated, lexicographically sorted, newline-joined references
    """
    references = set(current.split("\n")) if current else set()
    references.add(new_reference)
    return "\n".join(sorted(references))


@final
class ContextBucket:
    """Entries of one message context, keyed by msgid."""

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}

    def __contains__(self, msgid: object) -> bool:
        return msgid in self._entries

    def __getitem__(self, msgid: str) -> Entry:
        return self._entries[msgid]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, msgid: str) -> Entry | None:
        return self._entries.get(msgid)

    def keys(self) -> list[str]:
        return list(self._entries)

    def values(self) -> list[Entry]:
        return list(self._entries.values())

    def items(self) -> list[tuple[str, Entry]]:
        return list(self._entries.items())

    def insert(self, entry: Entry) -> None:
        if not entry.msgid:
            raise ValueError("Cannot insert an entry without msgid")
        self._entries[entry.msgid] = entry

    def sort_by_reference(self) -> None:
        """Order entries by lowercase reference; msgid breaks ties."""
        self._entries = dict(
            sorted(
                self._entries.items(),
                key=lambda item: (item[1].comments.reference.lower(), item[0]),
            )
        )


@final
class Catalog:
    """
    Extracted messages for one output file.

    Attributes:
        charset: Character set of the catalog
        headers: Header set, always carrying Content-Type and Plural-Forms
        nplurals: Plural slot count read from the Plural-Forms header
        contexts: Context buckets; the default context is keyed by ``""``
    """

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        charset: str = DEFAULT_CHARSET,
    ) -> None:
        """
        Create an empty catalog.

        Args:
            headers: Header overrides; required keys are defaulted
            charset: Catalog character set

        Raises:
            InvalidPluralFormsError: If the Plural-Forms header is unparseable
        """
        self.charset: str = charset
        self.headers: dict[str, str] = build_headers(headers)
        self.nplurals: int = parse_nplurals(self.headers[PLURAL_FORMS])
        self.contexts: dict[str, ContextBucket] = {DEFAULT_CONTEXT: ContextBucket()}

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.contexts.values())

    @property
    def default_context(self) -> ContextBucket:
        return self.contexts[DEFAULT_CONTEXT]

    def bucket_for(self, msgctxt: str | None) -> ContextBucket:
        """Return the bucket for ``msgctxt``, creating it on first use."""
        if not msgctxt:
            return self.default_context
        bucket = self.contexts.get(msgctxt)
        if bucket is None:
            bucket = ContextBucket()
            self.contexts[msgctxt] = bucket
            logger.debug(f"Created context {msgctxt!r}")
        return bucket

    def add(self, entry: Entry) -> MergeOutcome:
        """
        Insert an entry or merge its reference into an existing one.

        The first-seen entry keeps all of its fields except the reference
        list, so an earlier translator comment is never overwritten.

        Args:
            entry: Candidate entry carrying exactly one reference

        Returns:
            The outcome of the operation
        """
        if not entry.msgid:
            return MergeOutcome.DISCARDED

        bucket = self.bucket_for(entry.msgctxt)
        existing = bucket.get(entry.msgid)

        if existing is not None:
            existing.comments.reference = merge_reference(
                existing.comments.reference, entry.comments.reference
            )
            outcome = MergeOutcome.MERGED
        else:
            bucket.insert(entry)
            outcome = MergeOutcome.INSERTED

        bucket.sort_by_reference()
        return outcome

    def iter_entries(self) -> Iterator[Entry]:
        """Yield entries, default context first, then contexts by name."""
        for name in sorted(self.contexts):
            yield from self.contexts[name].values()

    def to_dict(self) -> dict[str, object]:
        """Nested plain-dict view: charset, headers and translations."""
        return {
            "charset": self.charset,
            "headers": dict(self.headers),
            "translations": {
                name: {msgid: entry.to_dict() for msgid, entry in bucket.items()}
                for name, bucket in self.contexts.items()
            },
        }
