"""Shared fixtures for the combiner tests."""

import os

import pytest

from settings import CombinerSettings

STYLE_MARKER = '<link rel="stylesheet" href="style.css" />'
SCRIPT_MARKER = '<script src="script.js"></script>'


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep SINGLEPAGE_* variables from the outer environment out of every test."""
    for key in list(os.environ):
        if key.startswith("SINGLEPAGE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_site(tmp_path):
    """Write a 3-file site into tmp_path and return settings pointing at it.

    Pass None for an asset to leave that file out.
    """

    def _make(index, style="", script="", **overrides):
        (tmp_path / "index.html").write_text(index, encoding="utf-8")
        if style is not None:
            (tmp_path / "style.css").write_text(style, encoding="utf-8")
        if script is not None:
            (tmp_path / "script.js").write_text(script, encoding="utf-8")

        fields = {
            "index_path": tmp_path / "index.html",
            "style_path": tmp_path / "style.css",
            "script_path": tmp_path / "script.js",
            "output_path": tmp_path / "singlepage.html",
            "style_marker": STYLE_MARKER,
            "script_marker": SCRIPT_MARKER,
        }
        fields.update(overrides)
        return CombinerSettings(**fields)

    return _make
