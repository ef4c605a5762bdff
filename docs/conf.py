# Configuration file for the Sphinx documentation builder.
#
# For the full list of options see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import os
import re
import sys
from pathlib import Path

# -- Path setup --------------------------------------------------------------

sys.path.insert(0, os.path.abspath("../src"))

# -- Project information -----------------------------------------------------

project = "range-reader"
copyright = "2026, Louis Maddox"
author = "Louis Maddox"

_init = (Path(__file__).parent.parent / "src" / "range_reader" / "__init__.py").read_text()
release = re.search(r'^__version__ = "([^"]*)"', _init, re.M).group(1)

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.doctest",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_autodoc_typehints",
]

intersphinx_mapping = {
    "python": ("https://docs.python.org/3/", None),
    "ranges": ("https://python-ranges.readthedocs.io/en/latest/", None),
}

templates_path = ["_templates"]
source_suffix = [".rst", ".md"]
main_doc = "index"
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

# https://github.com/sphinx-doc/sphinx/issues/5480
set_type_checking_flag = True

# https://www.sphinx-doc.org/en/master/usage/extensions/napoleon.html
napoleon_use_rtype = True
napoleon_use_params = True

# -- Options for HTML output -------------------------------------------------

html_theme = "sphinx_rtd_theme"
