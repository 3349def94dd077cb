#!/usr/bin/env python
"""Generate the supported encodings RST table from the registry."""

from __future__ import annotations

from htmlencoding.registry import REGISTRY


def render() -> str:
    """Return the supported encodings page as reStructuredText."""
    lines = [
        "Supported Encodings",
        "===================",
        "",
        f"htmlencoding recognises **{len(REGISTRY)} encodings**. Labels are",
        "matched case-insensitively after stripping ASCII whitespace.",
        "",
        ".. list-table::",
        "   :header-rows: 1",
        "   :widths: 20 50 15 15",
        "",
        "   * - Encoding",
        "     - Labels",
        "     - ASCII-compatible",
        "     - Single-byte",
    ]
    for e in sorted(REGISTRY, key=lambda e: e.name.lower()):
        lines += [
            f"   * - {e.name}",
            f"     - {', '.join(e.labels)}",
            f"     - {'Yes' if e.ascii_compatible else 'No'}",
            f"     - {'Yes' if e.is_single_byte else 'No'}",
        ]
    return "\n".join(lines) + "\n"


def main() -> None:
    """Print the supported encodings RST table to stdout."""
    print(render(), end="")


if __name__ == "__main__":
    main()
