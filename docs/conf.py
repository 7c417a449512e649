"""
Sphinx configuration for Telefmt documentation.
"""

from __future__ import annotations

from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SOURCE_ROOT = PROJECT_ROOT / "src"

project = "Telefmt"
author = "Telefmt Contributors"
extensions = [
    "sphinx.ext.autodoc",
    "myst_parser",
]
exclude_patterns = ["_build"]
autodoc_typehints = "description"
autodoc_member_order = "bysource"
html_theme = "alabaster"

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

import sys

sys.path.insert(0, str(SOURCE_ROOT))
