"""Stage 2: charset extraction from a transport ``Content-Type`` header."""

from __future__ import annotations

import logging
import string
import types

from htmlencoding.enums import Confidence
from htmlencoding.pipeline import ContentTypeHeader, EncodingDecision
from htmlencoding.registry import lookup

logger = logging.getLogger(__name__)

_HTTP_WHITESPACE = "\t\n\r "

# RFC 9110 token characters
_TOKEN_CHARS: frozenset[str] = frozenset(
    string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~"
)

_QUOTES = "\"'"


def _is_token(text: str) -> bool:
    return bool(text) and all(c in _TOKEN_CHARS for c in text)


def _parse_quoted_string(text: str, i: int) -> tuple[str, int]:
    """Read a quoted value starting at the opening quote at *text[i]*.

    Backslash escapes are honoured inside double quotes.  An unterminated
    value runs to the end of *text*.  Returns the value and the index just
    past the closing quote.
    """
    quote = text[i]
    i += 1
    n = len(text)
    chars: list[str] = []
    while i < n:
        c = text[i]
        if c == quote:
            return "".join(chars), i + 1
        if c == "\\" and quote == '"' and i + 1 < n:
            i += 1
            c = text[i]
        chars.append(c)
        i += 1
    return "".join(chars), i


def _parse_parameters(text: str) -> dict[str, str]:
    params: dict[str, str] = {}
    i = 0
    n = len(text)
    while i < n:
        while i < n and text[i] in _HTTP_WHITESPACE:
            i += 1
        start = i
        while i < n and text[i] not in ";=":
            i += 1
        name = text[start:i].strip(_HTTP_WHITESPACE).lower()
        if i >= n or text[i] == ";":
            # Parameter without a value
            i += 1
            continue
        i += 1  # '='
        while i < n and text[i] in _HTTP_WHITESPACE:
            i += 1
        if i < n and text[i] in _QUOTES:
            value, i = _parse_quoted_string(text, i)
            while i < n and text[i] != ";":
                i += 1
        else:
            start = i
            while i < n and text[i] != ";":
                i += 1
            value = text[start:i].strip(_HTTP_WHITESPACE)
        i += 1
        if _is_token(name) and value and name not in params:
            params[name] = value
    return params


def parse_content_type(value: str | None) -> ContentTypeHeader | None:
    """Parse a ``Content-Type`` header value.

    :param value: The raw header value, e.g. ``'text/html; charset="utf-8"'``.
    :returns: A :class:`ContentTypeHeader`, or ``None`` if *value* is empty
        or its media type is not a well-formed ``type/subtype``.
    """
    if not value:
        return None
    essence, _, rest = value.partition(";")
    media_type = essence.strip(_HTTP_WHITESPACE).lower()
    type_, slash, subtype = media_type.partition("/")
    if not slash or not _is_token(type_) or not _is_token(subtype):
        return None
    return ContentTypeHeader(
        media_type=media_type,
        parameters=types.MappingProxyType(_parse_parameters(rest)),
    )


def charset_from_content_type(value: str | None) -> EncodingDecision | None:
    """Return a tentative decision for the header's ``charset`` parameter.

    Missing headers, missing parameters, malformed values and labels the
    registry does not know all yield ``None``.
    """
    header = parse_content_type(value)
    if header is None or header.charset is None:
        return None
    encoding = lookup(header.charset)
    if encoding is None:
        logger.debug("ignoring unknown Content-Type charset %r", header.charset)
        return None
    return EncodingDecision(encoding, Confidence.TENTATIVE)
