"""
Tests for the extraction session.

This module tests argument extraction, reference formatting, catalog
lifecycle across file names, change callbacks and snapshots.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from gettext_extractor.config.schema import ExtractorConfig
from gettext_extractor.extraction.catalog import MergeOutcome
from gettext_extractor.extraction.nodes import Declaration, Declarator, Span
from gettext_extractor.extraction.session import (
    ExtractionSession,
    resolve_base_directory,
)
from gettext_extractor.utils.core.exceptions import InvalidPluralFormsError
from tests.utils.node_helpers import make_call

SessionFactory = Callable[..., ExtractionSession]


class TestScenarios:
    """End-to-end behaviour of single call-sites."""

    def test_singular_call(self, session: ExtractionSession) -> None:
        """Test that gettext("Hello") yields a singular entry without comment."""
        outcome = session.process_call(
            make_call("gettext", "Hello", filename="a.js", line=10)
        )

        assert outcome is MergeOutcome.INSERTED
        entry = session.catalog.default_context["Hello"]
        assert entry.to_dict() == {"msgid": "Hello", "comments": {"reference": "a.js:10"}}
        assert entry.msgstr == []

    def test_plural_call(self, session: ExtractionSession) -> None:
        """Test that ngettext initializes one empty slot per plural form."""
        _ = session.process_call(make_call("ngettext", "One item", "%d items", None))

        entry = session.catalog.default_context["One item"]
        assert entry.msgid_plural == "%d items"
        assert entry.msgstr == ["", ""]

    def test_repeated_call_merges(self, session: ExtractionSession) -> None:
        """Test that the same message at two lines becomes one entry."""
        _ = session.process_call(make_call("gettext", "Hello", filename="a.js", line=10))
        outcome = session.process_call(
            make_call("gettext", "Hello", filename="a.js", line=20)
        )

        assert outcome is MergeOutcome.MERGED
        assert len(session.catalog) == 1
        assert (
            session.catalog.default_context["Hello"].comments.reference
            == "a.js:10\na.js:20"
        )

    def test_context_call(self, session: ExtractionSession) -> None:
        """Test that pgettext stores the entry under its context."""
        _ = session.process_call(make_call("pgettext", "menu", "Open"))

        assert session.catalog.contexts["menu"]["Open"].msgctxt == "menu"
        assert "Open" not in session.catalog.default_context

    def test_base_directory_stripped(self, make_session: SessionFactory) -> None:
        """Test that the base directory prefix is removed from references."""
        session = make_session(base_directory="/home/dev/project")

        _ = session.process_call(
            make_call("gettext", "Hi", filename="/home/dev/project/src/app.py", line=3)
        )

        assert session.catalog.default_context["Hi"].comments.reference == "src/app.py:3"


class TestArgumentExtraction:
    """Test role-driven argument extraction."""

    def test_domain_and_count_not_copied(self, session: ExtractionSession) -> None:
        """Test that domain and count arguments never become entry fields."""
        _ = session.process_call(
            make_call("dngettext", "errors", "One error", "%d errors", 5)
        )

        entry = session.catalog.default_context["One error"]
        assert set(entry.to_dict()) == {"msgid", "msgid_plural", "msgstr", "comments"}

    def test_all_roles(self, session: ExtractionSession) -> None:
        """Test that dnpgettext fills msgctxt, msgid and msgid_plural."""
        _ = session.process_call(
            make_call("dnpgettext", "shop", "cart", "One item", "%d items", None)
        )

        entry = session.catalog.contexts["cart"]["One item"]
        assert entry.msgctxt == "cart"
        assert entry.msgid_plural == "%d items"
        assert entry.msgstr == ["", ""]

    def test_non_literal_msgid_discarded(self, session: ExtractionSession) -> None:
        """Test that a computed msgid yields no entry and no error."""
        outcome = session.process_call(make_call("gettext", None))

        assert outcome is MergeOutcome.DISCARDED
        assert len(session.catalog) == 0

    def test_empty_msgid_discarded(self, session: ExtractionSession) -> None:
        """Test that an empty string literal is not a msgid."""
        assert session.process_call(make_call("gettext", "")) is MergeOutcome.DISCARDED

    def test_missing_arguments(self, session: ExtractionSession) -> None:
        """Test that roles beyond the supplied arguments are absent."""
        assert session.process_call(make_call("pgettext", "menu")) is MergeOutcome.DISCARDED
        assert "menu" not in session.catalog.contexts

    def test_non_literal_plural_still_allocates_slots(
        self, session: ExtractionSession
    ) -> None:
        """Test that plural slots are created even if msgid_plural is computed."""
        _ = session.process_call(make_call("ngettext", "One", None, None))

        entry = session.catalog.default_context["One"]
        assert entry.msgid_plural is None
        assert entry.msgstr == ["", ""]

    def test_nplurals_from_headers(self, make_session: SessionFactory) -> None:
        """Test that the number of slots follows the Plural-Forms header."""
        session = make_session(
            headers={"plural-forms": "nplurals=3; plural=(n==1 ? 0 : n<5 ? 1 : 2);"}
        )

        _ = session.process_call(make_call("ngettext", "One", "Many", None))

        assert session.catalog.default_context["One"].msgstr == ["", "", ""]

    def test_unmatched_call_ignored(self, session: ExtractionSession) -> None:
        """Test that non-translation calls are ignored entirely."""
        assert session.process_call(make_call("print", "Hello")) is None
        assert len(session.catalog) == 0

    def test_custom_function_names(self, make_session: SessionFactory) -> None:
        """Test extraction with a user-defined signature scheme."""
        session = make_session(functionNames={"t": ["msgctxt", "msgid"], "_": ["msgid"]})

        _ = session.process_call(make_call(None, "nav", "Home", property_name="t"))
        _ = session.process_call(make_call("_", "Bye"))
        assert session.process_call(make_call("gettext", "Ignored")) is None

        assert "Home" in session.catalog.contexts["nav"]
        assert "Bye" in session.catalog.default_context

    def test_skipped_role_position(self, make_session: SessionFactory) -> None:
        """Test that a position without role is skipped."""
        session = make_session(function_names={"tr": [None, "msgid"]})

        _ = session.process_call(make_call("tr", "ignored", "Kept"))

        assert session.catalog.default_context.keys() == ["Kept"]


class TestTranslatorComments:
    """Test translator annotations flowing into entries."""

    def test_own_comment(self, session: ExtractionSession) -> None:
        """Test that a call's own annotation is attached."""
        _ = session.process_call(
            make_call("gettext", "Save", comments=(" Translators: button label",))
        )

        assert session.catalog.default_context["Save"].comments.translator == "button label"

    def test_relocated_comment(self, session: ExtractionSession) -> None:
        """Test that a declaration annotation reaches its initializer call."""
        span = Span(3, 8, 3, 23)
        recorded = session.process_declaration(
            Declaration(
                declarators=(Declarator(span),),
                comments=(" translators: window title",),
                filename="a.js",
            )
        )
        _ = session.process_call(make_call("gettext", "Editor", line=3, span=span))

        assert recorded == 1
        assert session.catalog.default_context["Editor"].comments.translator == "window title"

    def test_relocation_misses_other_file(self, session: ExtractionSession) -> None:
        """Test that the same span in another file gets no annotation."""
        span = Span(3, 8, 3, 23)
        _ = session.process_declaration(
            Declaration(
                declarators=(Declarator(span),),
                comments=(" translators: window title",),
                filename="a.js",
            )
        )
        _ = session.process_call(
            make_call("gettext", "Other", filename="b.js", line=3, span=span)
        )

        assert session.catalog.default_context["Other"].comments.translator is None

    def test_relocation_misses_other_span(self, session: ExtractionSession) -> None:
        """Test that a later reference to the binding gets no annotation."""
        _ = session.process_declaration(
            Declaration(
                declarators=(Declarator(Span(3, 8, 3, 23)),),
                comments=(" translators: window title",),
                filename="a.js",
            )
        )
        _ = session.process_call(make_call("gettext", "Editor", line=9))

        assert session.catalog.default_context["Editor"].comments.translator is None


class TestBaseDirectory:
    """Test reference paths relative to the base directory."""

    def test_resolve_base_directory(self) -> None:
        """Test normalization of configured base directories."""
        assert resolve_base_directory(None) is None
        assert resolve_base_directory("") is None
        assert resolve_base_directory("/srv/app") == "/srv/app/"
        assert resolve_base_directory("/srv/app///") == "/srv/app/"
        assert resolve_base_directory("/") == "/"

    def test_dot_means_working_directory(
        self,
        make_session: SessionFactory,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that '.' resolves to the working directory at call time."""
        monkeypatch.chdir(tmp_path)
        session = make_session(baseDirectory=".")

        _ = session.process_call(
            make_call("gettext", "Hi", filename=f"{Path.cwd()}/pkg/mod.py", line=7)
        )

        assert session.catalog.default_context["Hi"].comments.reference == "pkg/mod.py:7"

    def test_other_paths_untouched(self, make_session: SessionFactory) -> None:
        """Test that paths outside the base directory are kept as-is."""
        session = make_session(base_directory="/home/dev/project")

        _ = session.process_call(
            make_call("gettext", "Hi", filename="/opt/shared/lib.py", line=1)
        )

        assert session.catalog.default_context["Hi"].comments.reference == "/opt/shared/lib.py:1"


class TestCatalogLifecycle:
    """Test catalog creation per target file name."""

    def test_fresh_session_has_catalog(self) -> None:
        """Test that a new session starts with an empty catalog for its file name."""
        session = ExtractionSession(ExtractorConfig(file_name="app.pot"))

        assert session.file_name == "app.pot"
        assert len(session.catalog) == 0
        assert session.catalog.nplurals == 2

    def test_new_file_name_starts_new_catalog(self, session: ExtractionSession) -> None:
        """Test that switching the file name starts an empty catalog."""
        _ = session.process_call(make_call("gettext", "Hello"))
        first = session.catalog

        session.configure(ExtractorConfig(file_name="other.po", headers={"Language": "de"}))

        assert session.file_name == "other.po"
        assert session.catalog is not first
        assert len(session.catalog) == 0
        assert session.catalog.headers["Language"] == "de"

    def test_same_file_name_keeps_catalog(self, session: ExtractionSession) -> None:
        """Test that reconfiguring with the same file name keeps the catalog."""
        _ = session.process_call(make_call("gettext", "Hello"))
        first = session.catalog

        session.configure(ExtractorConfig(function_names={"_": ["msgid"]}))

        assert session.catalog is first
        assert session.process_call(make_call("_", "Bye")) is MergeOutcome.INSERTED
        assert len(session.catalog) == 2

    def test_relocations_outlive_catalog(self, session: ExtractionSession) -> None:
        """Test that the relocation table is session-scoped."""
        _ = session.process_declaration(
            Declaration(
                declarators=(Declarator(Span(1, 4, 1, 16)),),
                comments=(" translators: x",),
                filename="a.js",
            )
        )

        session.configure(ExtractorConfig(file_name="other.po"))

        assert len(session.relocations) == 1

    def test_invalid_plural_forms(self) -> None:
        """Test that an unparseable Plural-Forms header is fatal."""
        with pytest.raises(InvalidPluralFormsError):
            _ = ExtractionSession(ExtractorConfig(headers={"Plural-Forms": "plural=n"}))


class TestCallbacksAndSnapshot:
    """Test change notification and catalog snapshots."""

    def test_callback_per_matched_call(self, session: ExtractionSession) -> None:
        """Test that callbacks run after every matched call-site only."""
        outcomes: list[MergeOutcome] = []
        session.register_change_callback(lambda _session, outcome: outcomes.append(outcome))

        _ = session.process_call(make_call("gettext", "Hello"))
        _ = session.process_call(make_call("gettext", "Hello", line=11))
        _ = session.process_call(make_call("gettext", None))
        _ = session.process_call(make_call("print", "Hello"))

        assert outcomes == [
            MergeOutcome.INSERTED,
            MergeOutcome.MERGED,
            MergeOutcome.DISCARDED,
        ]

    def test_unregister_callback(self, session: ExtractionSession) -> None:
        """Test that unregistered callbacks are no longer called."""
        calls: list[MergeOutcome] = []

        def callback(_session: ExtractionSession, outcome: MergeOutcome) -> None:
            calls.append(outcome)

        session.register_change_callback(callback)
        session.register_change_callback(callback)
        session.unregister_change_callback(callback)
        _ = session.process_call(make_call("gettext", "Hello"))

        assert calls == []

    def test_snapshot_is_independent(self, session: ExtractionSession) -> None:
        """Test that snapshots do not share state with the live catalog."""
        _ = session.process_call(make_call("gettext", "Hello"))
        snapshot = session.snapshot()

        _ = session.process_call(make_call("gettext", "Hello", line=99))

        assert snapshot.default_context["Hello"].comments.reference == "a.js:10"
        assert session.catalog.default_context["Hello"].comments.reference == "a.js:10\na.js:99"

    def test_idempotent_over_traversal_order(self, make_session: SessionFactory) -> None:
        """Test that the same call-sites in any order build the same catalog."""
        calls = [
            make_call("gettext", "Hello", filename="b.py", line=4),
            make_call("ngettext", "One", "Many", None, filename="a.py", line=9),
            make_call("gettext", "Hello", filename="a.py", line=2),
            make_call("pgettext", "menu", "Open", filename="c.py", line=1),
            make_call("gettext", "Bye", filename="C.py", line=1),
        ]

        forward = make_session()
        for call in calls:
            _ = forward.process_call(call)
        backward = make_session()
        for call in reversed(calls):
            _ = backward.process_call(call)

        assert forward.catalog.to_dict() == backward.catalog.to_dict()
        assert forward.catalog.default_context.keys() == ["Hello", "One", "Bye"]
        assert backward.catalog.default_context.keys() == ["Hello", "One", "Bye"]
