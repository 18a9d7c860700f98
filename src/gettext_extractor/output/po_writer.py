"""
Catalog serialization to gettext PO/POT files using polib.

The extraction engine never touches the file system; this module renders a
catalog snapshot and decides when to write it, either after every processed
call-site (write-through) or once at the end of a run.
"""

from __future__ import annotations

import hashlib
import logging
import tempfile
from pathlib import Path

import polib

from ..extraction.catalog import Catalog, Entry, MergeOutcome
from ..extraction.session import ExtractionSession

logger = logging.getLogger(__name__)


def split_reference(reference: str) -> tuple[str, str]:
    """Split ``path:line`` at the last colon into a polib occurrence."""
    path, separator, line = reference.rpartition(":")
    if not separator or not line.isdigit():
        return (reference, "")
    return (path, line)


def build_poentry(entry: Entry, nplurals: int) -> polib.POEntry:
    """
    Convert a catalog entry to a polib entry.

    Args:
        entry: Catalog entry
        nplurals: Plural slot count, used when a plural entry has no slots

    Returns:
        polib.POEntry with references as occurrences and the translator
        annotation as translator comment
    """
    poentry = polib.POEntry(
        msgid=entry.msgid or "",
        occurrences=[split_reference(ref) for ref in entry.comments.references],
        tcomment=entry.comments.translator or "",
    )
    if entry.msgctxt is not None:
        poentry.msgctxt = entry.msgctxt

    if entry.is_plural:
        slots = entry.msgstr or [""] * nplurals
        # polib drops an empty msgid_plural, which leaves msgstr[N] orphaned
        poentry.msgid_plural = entry.msgid_plural or poentry.msgid
        poentry.msgstr_plural = dict(enumerate(slots))
    else:
        poentry.msgstr = entry.msgstr[0] if entry.msgstr else ""

    return poentry


def build_pofile(catalog: Catalog) -> polib.POFile:
    """
    Build a polib file from a catalog.

    Entries of the default context come first, then other contexts sorted by
    name, each in the catalog's reference order.

    Args:
        catalog: Catalog to convert

    Returns:
        polib.POFile ready to be rendered or saved
    """
    pofile = polib.POFile(encoding=catalog.charset.lower())
    pofile.metadata = dict(catalog.headers)

    for entry in catalog.iter_entries():
        pofile.append(build_poentry(entry, catalog.nplurals))

    return pofile


def render_catalog(catalog: Catalog) -> str:
    """Render a catalog as PO file text."""
    return str(build_pofile(catalog))


def write_catalog(catalog: Catalog, output_file: Path) -> None:
    """
    Write a catalog to disk atomically.

    Args:
        catalog: Catalog to write
        output_file: Destination .po/.pot path; parent directories are created

    Raises:
        OSError: If file operations fail
    """
    content = render_catalog(catalog)
    _ = output_file.parent.mkdir(parents=True, exist_ok=True)

    temp_file = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding=catalog.charset.lower(),
            dir=output_file.parent,
            prefix=f".{output_file.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            _ = temp_file.write(content)
            temp_file.flush()
            temp_path = Path(temp_file.name)

        _ = temp_path.replace(output_file)

    except Exception as e:
        if temp_file and Path(temp_file.name).exists():
            Path(temp_file.name).unlink(missing_ok=True)
        raise OSError(f"Failed to write catalog to {output_file}: {e}") from e

    logger.debug(f"Wrote {len(catalog)} entries to {output_file}")


def catalog_is_current(catalog: Catalog, output_file: Path) -> bool:
    """
    Check whether ``output_file`` already holds exactly this catalog.

    Args:
        catalog: Freshly extracted catalog
        output_file: Existing catalog file

    Returns:
        True if the file exists and its content hash matches
    """
    if not output_file.exists():
        return False

    rendered = render_catalog(catalog).encode(catalog.charset.lower())
    with open(output_file, "rb") as existing_file:
        existing_hash = hashlib.sha256(existing_file.read()).hexdigest()

    return existing_hash == hashlib.sha256(rendered).hexdigest()


class CatalogWriter:
    """
    Writes a session's catalog to disk.

    In write-through mode the catalog is rewritten after every processed
    call-site; otherwise only :meth:`flush` writes.
    """

    def __init__(self, output_file: Path | None = None, write_through: bool = False) -> None:
        """
        Initialize the writer.

        Args:
            output_file: Destination path; defaults to the session's file name
            write_through: Write after every processed call-site
        """
        self.output_file: Path | None = output_file
        self.write_through: bool = write_through
        self.write_count: int = 0

    def attach(self, session: ExtractionSession) -> None:
        """Start listening to a session's changes."""
        session.register_change_callback(self._on_change)

    def detach(self, session: ExtractionSession) -> None:
        """Stop listening to a session's changes."""
        session.unregister_change_callback(self._on_change)

    def target_for(self, session: ExtractionSession) -> Path:
        """Destination path for the session's current catalog."""
        return self.output_file or Path(session.file_name)

    def flush(self, session: ExtractionSession) -> Path:
        """
        Write the session's current catalog.

        Returns:
            Path that was written
        """
        target = self.target_for(session)
        write_catalog(session.snapshot(), target)
        self.write_count += 1
        return target

    def _on_change(self, session: ExtractionSession, outcome: MergeOutcome) -> None:
        if self.write_through:
            logger.debug(f"Write-through after {outcome.value} call-site")
            _ = self.flush(session)
