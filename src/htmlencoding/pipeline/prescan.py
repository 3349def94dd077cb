"""Stage 3: meta charset prescan.

A byte-level scanner for ``<meta charset>`` and
``<meta http-equiv="content-type" content="...; charset=...">``
declarations, run over raw bytes before any encoding is known.  Only fixed
ASCII byte sequences are matched, so it is meaningful for any
ASCII-compatible encoding.

See https://html.spec.whatwg.org/multipage/parsing.html#prescan-a-byte-stream-to-determine-its-encoding
"""

from __future__ import annotations

import logging

from htmlencoding._utils import ASCII_WHITESPACE, DEFAULT_PRESCAN_BYTES
from htmlencoding.enums import Confidence
from htmlencoding.pipeline import EncodingDecision
from htmlencoding.registry import UTF_8, WINDOWS_1252, EncodingInfo, is_utf16, lookup

logger = logging.getLogger(__name__)

_LT = 0x3C  # '<'
_GT = 0x3E  # '>'
_SLASH = 0x2F  # '/'
_EQUALS = 0x3D  # '='
_SEMICOLON = 0x3B  # ';'
_QUOTES = b"\"'"

_WHITESPACE: frozenset[int] = frozenset(ASCII_WHITESPACE)
_TAG_NAME_END: frozenset[int] = _WHITESPACE | {_GT}
_META_NAME_END: frozenset[int] = _WHITESPACE | {_SLASH}


def _is_ascii_letter(byte: int) -> bool:
    return 0x41 <= byte <= 0x5A or 0x61 <= byte <= 0x7A


def _lower(byte: int) -> int:
    if 0x41 <= byte <= 0x5A:
        return byte | 0x20
    return byte


def _get_attribute(window: bytes, pos: int) -> tuple[tuple[bytes, bytes] | None, int]:
    """Read one attribute starting at *pos*.

    Returns ``((name, value), pos)`` for an attribute, or ``(None, pos)``
    when the tag ends at *pos* (a ``>`` byte) or the window runs out
    (``pos == len(window)``).  Names and values are ASCII-lowercased.
    """
    n = len(window)
    while pos < n and (window[pos] in _WHITESPACE or window[pos] == _SLASH):
        pos += 1
    if pos >= n or window[pos] == _GT:
        return None, pos

    name = bytearray()
    value = bytearray()

    # Attribute name
    while True:
        if pos >= n:
            return None, n
        byte = window[pos]
        if byte == _EQUALS and name:
            pos += 1
            break
        if byte in _WHITESPACE:
            while pos < n and window[pos] in _WHITESPACE:
                pos += 1
            if pos >= n:
                return None, n
            if window[pos] != _EQUALS:
                return (bytes(name), b""), pos
            pos += 1
            break
        if byte in (_SLASH, _GT):
            return (bytes(name), b""), pos
        name.append(_lower(byte))
        pos += 1

    # Attribute value
    while pos < n and window[pos] in _WHITESPACE:
        pos += 1
    if pos >= n:
        return None, n
    byte = window[pos]
    if byte in _QUOTES:
        quote = byte
        pos += 1
        while pos < n:
            byte = window[pos]
            if byte == quote:
                return (bytes(name), bytes(value)), pos + 1
            value.append(_lower(byte))
            pos += 1
        return None, n
    if byte == _GT:
        return (bytes(name), b""), pos
    while pos < n:
        byte = window[pos]
        if byte in _TAG_NAME_END:
            return (bytes(name), bytes(value)), pos
        value.append(_lower(byte))
        pos += 1
    return None, n


def extract_charset_from_content(content: bytes) -> bytes | None:
    """Extract the ``charset=`` value from a meta ``content`` attribute.

    Implements the HTML "algorithm for extracting a character encoding from
    a meta element".  Returns the raw label, or ``None``.
    """
    content = content.lower()
    n = len(content)
    pos = 0
    while True:
        pos = content.find(b"charset", pos)
        if pos == -1:
            return None
        pos += len(b"charset")
        while pos < n and content[pos] in _WHITESPACE:
            pos += 1
        if pos < n and content[pos] == _EQUALS:
            break
    pos += 1
    while pos < n and content[pos] in _WHITESPACE:
        pos += 1
    if pos >= n:
        return None
    byte = content[pos]
    if byte in _QUOTES:
        end = content.find(bytes((byte,)), pos + 1)
        if end == -1:
            return None
        return content[pos + 1 : end]
    end = pos
    while end < n and content[end] not in _WHITESPACE and content[end] != _SEMICOLON:
        end += 1
    return content[pos:end]


def declared_encoding(label: bytes) -> EncodingInfo | None:
    """Map a label found in a meta declaration to the encoding to use."""
    if label.strip(ASCII_WHITESPACE) == b"x-user-defined":
        return WINDOWS_1252
    encoding = lookup(label)
    # A document that can be prescanned as ASCII bytes cannot be UTF-16.
    if encoding is not None and is_utf16(encoding):
        return UTF_8
    return encoding


def _scan_meta(window: bytes, pos: int) -> tuple[EncodingInfo | None, int]:
    """Process the attributes of a ``<meta`` tag whose name ends before *pos*."""
    seen: set[bytes] = set()
    got_pragma = False
    need_pragma: bool | None = None
    charset: EncodingInfo | None = None
    while True:
        attr, pos = _get_attribute(window, pos)
        if attr is None:
            break
        name, value = attr
        if name in seen:
            continue
        seen.add(name)
        if name == b"http-equiv":
            if value == b"content-type":
                got_pragma = True
        elif name == b"content":
            if charset is None:
                label = extract_charset_from_content(value)
                charset = declared_encoding(label) if label is not None else None
                if charset is not None:
                    need_pragma = True
        elif name == b"charset":
            charset = declared_encoding(value)
            need_pragma = False

    if need_pragma is None or (need_pragma and not got_pragma):
        return None, pos
    return charset, pos


def _skip_tag(window: bytes, pos: int) -> int:
    """Skip a tag name and its attributes; *pos* is just past ``<`` or ``</``."""
    n = len(window)
    while pos < n and window[pos] not in _TAG_NAME_END:
        pos += 1
    while True:
        attr, pos = _get_attribute(window, pos)
        if attr is None:
            return pos


def find_declaration(
    data: bytes, max_bytes: int = DEFAULT_PRESCAN_BYTES
) -> tuple[EncodingDecision | None, int | None]:
    """Locate the first usable meta charset declaration in the prescan window.

    :returns: The certain decision and the offset just past the declaring
        tag's ``>``, or ``None`` for the offset when the window ends before
        the tag closes.  ``(None, None)`` if the window holds no declaration.
    """
    window = bytes(data[:max_bytes])
    n = len(window)
    pos = 0
    while pos < n:
        if window[pos] != _LT:
            pos += 1
            continue

        if window.startswith(b"<!--", pos):
            # The dashes of "<!--" may also close the comment ("<!-->").
            end = window.find(b"-->", pos + 2)
            if end == -1:
                return None, None
            pos = end + 3
            continue

        if (
            window[pos + 1 : pos + 5].lower() == b"meta"
            and pos + 5 < n
            and window[pos + 5] in _META_NAME_END
        ):
            encoding, pos = _scan_meta(window, pos + 6)
            if encoding is not None:
                logger.debug("prescan found %s", encoding.name)
                decision = EncodingDecision(encoding, Confidence.CERTAIN)
                return decision, (pos + 1 if pos < n else None)
            if pos >= n:
                return None, None
            pos += 1
            continue

        nxt = window[pos + 1] if pos + 1 < n else -1
        if _is_ascii_letter(nxt) or (
            nxt == _SLASH and pos + 2 < n and _is_ascii_letter(window[pos + 2])
        ):
            pos = _skip_tag(window, pos + 1)
            if pos >= n:
                return None, None
            pos += 1
            continue

        if nxt in (0x21, _SLASH, 0x3F):  # '<!', '</', '<?'
            end = window.find(b">", pos + 1)
            if end == -1:
                return None, None
            pos = end + 1
            continue

        pos += 1
    return None, None


def prescan(data: bytes, max_bytes: int = DEFAULT_PRESCAN_BYTES) -> EncodingDecision | None:
    """Scan the first *max_bytes* of *data* for a meta charset declaration.

    :param data: The raw byte data to scan.
    :param max_bytes: Size of the prescan window.
    :returns: A certain :class:`EncodingDecision` for the first usable
        declaration in document order, or ``None`` if the window holds none.
    """
    return find_declaration(data, max_bytes)[0]
