"""Sphinx configuration for the match report documentation."""

from __future__ import annotations

import os
import sys
from datetime import datetime

# Ensure the project root is discoverable for autodoc/autosummary imports.
PROJECT_ROOT = os.path.abspath(os.path.join(__file__, "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

project = "Match Report Consolidation"
author = "WelshDragon"
copyright = f"{datetime.now():%Y}, {author}"

try:
    from importlib.metadata import version as _dist_version

    version = _dist_version("matchreport")
except ImportError:  # pragma: no cover - docs build should not need an install
    version = "0.1.0"
release = version

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
]

autosummary_generate = True
autodoc_default_options = {"members": True, "undoc-members": False}

templates_path = ["_templates"]
exclude_patterns: list[str] = ["_build", "Thumbs.db", ".DS_Store"]

html_theme = "sphinx_rtd_theme"

# Docstrings follow the numpydoc layout checked by tests/test_docstrings.py.
autodoc_typehints = "description"
napoleon_google_docstring = False
napoleon_numpy_docstring = True
