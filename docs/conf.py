"""Sphinx configuration for htmlencoding documentation.

``encodings.rst`` is regenerated from the registry on every build, so the
label table cannot drift from the code.
"""

import runpy
from pathlib import Path

import htmlencoding

_DOCS = Path(__file__).parent

project = "htmlencoding"
copyright = "2026, htmlencoding contributors"
author = "htmlencoding contributors"
release = htmlencoding.__version__
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx_copybutton",
]

exclude_patterns = ["_build"]

html_theme = "furo"
html_title = f"htmlencoding {release}"

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
}

autodoc_member_order = "bysource"
autodoc_typehints = "description"
autodoc_type_aliases = {"StringEncoding": "htmlencoding.StringEncoding"}

# Skip the prompt and output markers of the console examples in index.rst.
copybutton_prompt_text = "$ "
copybutton_only_copy_prompt_lines = True


def _write_encoding_table() -> None:
    script = _DOCS.parent / "scripts" / "generate_encoding_table.py"
    render = runpy.run_path(str(script))["render"]
    (_DOCS / "encodings.rst").write_text(render(), encoding="utf-8")


_write_encoding_table()
