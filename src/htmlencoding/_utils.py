"""Internal shared utilities for htmlencoding."""

from __future__ import annotations

from htmlencoding.registry import EncodingInfo, lookup

#: Encoding used when neither the stream nor the transport declares one.
DEFAULT_ENCODING: str = "windows-1252"

#: Number of leading bytes the meta prescan may examine.
DEFAULT_PRESCAN_BYTES: int = 1024

#: ASCII whitespace as defined by the HTML and MIME standards.
ASCII_WHITESPACE: bytes = b"\t\n\x0c\r "


def _validate_prescan_bytes(prescan_bytes: int) -> None:
    """Raise ValueError if *prescan_bytes* is not a positive integer."""
    if (
        isinstance(prescan_bytes, bool)
        or not isinstance(prescan_bytes, int)
        or prescan_bytes < 1
    ):
        msg = "prescan_bytes must be a positive integer"
        raise ValueError(msg)


def _resolve_default_encoding(default_encoding: str | EncodingInfo) -> EncodingInfo:
    """Look up the configured fallback encoding, raising ValueError if unknown.

    An :class:`EncodingInfo` is resolved by name so the registry's own entry
    is used.
    """
    label = (
        default_encoding.name
        if isinstance(default_encoding, EncodingInfo)
        else default_encoding
    )
    info = lookup(label)
    if info is None:
        msg = f"unknown default encoding: {default_encoding!r}"
        raise ValueError(msg)
    return info
