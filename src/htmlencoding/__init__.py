"""HTML character encoding sniffing.

Determines how to decode a document's bytes from its byte order mark, the
transport ``Content-Type`` header and an in-document ``<meta>`` declaration,
in that order of precedence, and decodes it.
"""

from __future__ import annotations

from htmlencoding._utils import DEFAULT_ENCODING, DEFAULT_PRESCAN_BYTES
from htmlencoding.detector import EncodingSniffer
from htmlencoding.enums import Confidence
from htmlencoding.pipeline import (
    ContentTypeHeader,
    EncodingDecision,
    EncodingDecodeError,
    SniffResult,
    StringEncoding,
)
from htmlencoding.pipeline.content_type import parse_content_type
from htmlencoding.pipeline.orchestrator import reconsider_encoding, run_pipeline
from htmlencoding.registry import (
    EncodingInfo,
    is_ascii_compatible,
    is_utf16,
    lookup,
    uses_lossy_windows1252_decoding,
)

__version__ = "1.0.0"
__all__ = [
    "Confidence",
    "ContentTypeHeader",
    "EncodingDecision",
    "EncodingDecodeError",
    "EncodingSniffer",
    "SniffResult",
    "StringEncoding",
    "determine_encoding",
    "is_ascii_compatible",
    "is_utf16",
    "lookup",
    "parse_content_type",
    "reconsider_encoding",
    "uses_lossy_windows1252_decoding",
]


def determine_encoding(
    data: bytes | bytearray | memoryview | str,
    content_type: str | None = None,
    *,
    default_encoding: str | EncodingInfo = DEFAULT_ENCODING,
    prescan_bytes: int = DEFAULT_PRESCAN_BYTES,
    errors: str | None = None,
) -> SniffResult:
    """Determine the encoding of a document and decode it.

    :param data: The raw document bytes.
    :param content_type: The value of the HTTP ``Content-Type`` header, if any.
    :param default_encoding: Encoding to fall back to when nothing is
        declared.  Defaults to windows-1252.
    :param prescan_bytes: How many leading bytes to search for a ``<meta>``
        declaration.  Defaults to 1024.
    :param errors: Codec error handler (e.g. ``"replace"``) to use instead of
        the default policy of decoding strictly.
    :returns: A ``(decision, text)`` :class:`SniffResult`.
    :raises EncodingDecodeError: If the stream is not valid in the chosen
        encoding.  The exception carries the ``decision``.
    :raises ValueError: If *prescan_bytes* or *default_encoding* is invalid.
    """
    return run_pipeline(
        data,
        content_type,
        default_encoding=default_encoding,
        prescan_bytes=prescan_bytes,
        errors=errors,
    )
