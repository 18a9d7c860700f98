"""
Global test fixtures for gettext-extractor tests.

Provides extraction sessions and a small Python source tree to scan.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from gettext_extractor.config.schema import ExtractorConfig
from gettext_extractor.extraction.session import ExtractionSession


@pytest.fixture
def session() -> ExtractionSession:
    """Session with the default configuration."""
    return ExtractionSession()


@pytest.fixture
def make_session() -> Callable[..., ExtractionSession]:
    """Factory building a session from configuration keyword arguments."""

    def _make_session(**config: object) -> ExtractionSession:
        return ExtractionSession(ExtractorConfig.model_validate(config))

    return _make_session


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    Create a small project with translation calls.

    Layout::

        project/
            app/views.py      gettext, ngettext, pgettext
            app/models.py     gettext reused from views.py
            .venv/lib.py      excluded by default
    """
    project = tmp_path / "project"
    app = project / "app"
    app.mkdir(parents=True)
    venv = project / ".venv"
    venv.mkdir()

    _ = (app / "views.py").write_text(
        textwrap.dedent(
            """\
            from gettext import gettext, ngettext, pgettext

            # Translators: heading of the start page
            title = gettext("Welcome")


            def files(count):
                return ngettext("One file", "%d files", count)


            label = pgettext("menu", "Open")
            """
        ),
        encoding="utf-8",
    )
    _ = (app / "models.py").write_text(
        textwrap.dedent(
            """\
            from gettext import gettext

            name = gettext("Welcome")
            """
        ),
        encoding="utf-8",
    )
    _ = (venv / "lib.py").write_text('gettext("Vendored")\n', encoding="utf-8")

    return project
