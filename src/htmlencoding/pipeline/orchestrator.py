"""Pipeline orchestrator: resolves an encoding in precedence order and decodes."""

from __future__ import annotations

import logging

from htmlencoding._utils import (
    DEFAULT_ENCODING,
    DEFAULT_PRESCAN_BYTES,
    _resolve_default_encoding,
    _validate_prescan_bytes,
)
from htmlencoding.enums import Confidence
from htmlencoding.pipeline import (
    EncodingDecision,
    EncodingDecodeError,
    SniffResult,
)
from htmlencoding.pipeline.bom import bom_length, detect_bom
from htmlencoding.pipeline.content_type import charset_from_content_type
from htmlencoding.pipeline.prescan import declared_encoding, prescan
from htmlencoding.registry import (
    UTF_8,
    EncodingInfo,
    is_ascii_compatible,
    is_utf16,
    uses_lossy_windows1252_decoding,
)

logger = logging.getLogger(__name__)


def choose(
    current: EncodingDecision | None, candidate: EncodingDecision | None
) -> EncodingDecision | None:
    """Apply the override policy between the current decision and a new signal.

    A final decision (certain or irrelevant) is never replaced.  A tentative
    decision is replaced by any candidate of equal or higher confidence.
    """
    if candidate is None:
        return current
    if current is None:
        return candidate
    if current.confidence.is_final or candidate.confidence < current.confidence:
        return current
    return candidate


def _decode_errors(encoding: EncodingInfo) -> str:
    if encoding.is_single_byte and uses_lossy_windows1252_decoding():
        return "replace"
    return "strict"


def decode_stream(
    data: bytes,
    decision: EncodingDecision,
    *,
    skip: int = 0,
    errors: str | None = None,
) -> str:
    """Decode the whole of *data* from byte *skip* onward under *decision*.

    :param errors: Codec error handler.  When ``None``, legacy single-byte
        encodings substitute replacement characters if the platform decodes
        windows-1252 lossily, and everything else decodes strictly.
    :raises EncodingDecodeError: If strict decoding fails.
    """
    handler = errors if errors is not None else _decode_errors(decision.encoding)
    try:
        return bytes(data[skip:]).decode(decision.encoding.python_codec, handler)
    except UnicodeDecodeError as exc:
        logger.debug("decoding as %s failed: %s", decision.encoding.name, exc)
        raise EncodingDecodeError(decision, exc) from exc


def sniff(
    data: bytes,
    content_type: str | None = None,
    *,
    default_encoding: str | EncodingInfo = DEFAULT_ENCODING,
    prescan_bytes: int = DEFAULT_PRESCAN_BYTES,
) -> tuple[EncodingDecision, int]:
    """Determine the encoding of *data* without decoding it.

    :returns: The decision and the number of leading BOM bytes to skip when
        decoding.
    """
    _validate_prescan_bytes(prescan_bytes)
    default = _resolve_default_encoding(default_encoding)

    if not data:
        return EncodingDecision(default, Confidence.IRRELEVANT), 0

    # Stage 1: a BOM is authoritative over every other signal.
    decision = detect_bom(data)
    if decision is not None:
        logger.debug("BOM found: %s", decision.encoding.name)
        return decision, bom_length(decision.encoding)

    # Stage 2: transport metadata is only a tentative hint.
    decision = choose(None, charset_from_content_type(content_type))
    if decision is not None:
        logger.debug("Content-Type charset: %s", decision.encoding.name)

    # Stage 3: the prescan matches raw ASCII bytes, which is meaningless if
    # the transport says the stream is not ASCII-compatible.
    if decision is None or is_ascii_compatible(decision.encoding):
        decision = choose(decision, prescan(data, prescan_bytes))
    else:
        logger.debug("skipping prescan under %s", decision.encoding.name)

    # Stage 4: configured fallback.
    if decision is None:
        logger.debug("no declaration found, falling back to %s", default.name)
        decision = EncodingDecision(default, Confidence.TENTATIVE)
    return decision, 0


def run_pipeline(
    data: bytes | bytearray | memoryview | str,
    content_type: str | None = None,
    *,
    default_encoding: str | EncodingInfo = DEFAULT_ENCODING,
    prescan_bytes: int = DEFAULT_PRESCAN_BYTES,
    errors: str | None = None,
) -> SniffResult:
    """Run the full sniffing pipeline and decode the stream.

    :param data: The raw document bytes.  Text input is returned as-is with
        an irrelevant confidence.
    :param content_type: The transport ``Content-Type`` header value, if any.
    :param default_encoding: Encoding used when nothing is declared.
    :param prescan_bytes: Size of the meta prescan window.
    :param errors: Codec error handler overriding the default decode policy.
    :returns: A :class:`SniffResult` of the decision and the decoded text.
    :raises EncodingDecodeError: If the chosen encoding cannot decode the
        stream and no lossy policy applies.
    """
    if isinstance(data, str):
        _validate_prescan_bytes(prescan_bytes)
        _resolve_default_encoding(default_encoding)
        return SniffResult(EncodingDecision(UTF_8, Confidence.IRRELEVANT), data)

    data = bytes(data)
    decision, skip = sniff(
        data,
        content_type,
        default_encoding=default_encoding,
        prescan_bytes=prescan_bytes,
    )
    # Always decode the entire stream from the start; nothing decoded under
    # an earlier guess is reused.
    text = decode_stream(data, decision, skip=skip, errors=errors)
    return SniffResult(decision, text)


def reconsider_encoding(
    decision: EncodingDecision, label: str | bytes | None
) -> EncodingDecision:
    """Apply an encoding declaration discovered after decoding started.

    Implements the HTML "change the encoding" step.  If the returned
    decision names a different encoding than *decision*, the caller must
    discard its output and decode the stream again from the first byte.
    """
    if decision.confidence.is_final:
        return decision
    if is_utf16(decision.encoding):
        return EncodingDecision(decision.encoding, Confidence.CERTAIN)
    if isinstance(label, str):
        label = label.encode("ascii", "replace")
    new_encoding = declared_encoding(label) if label else None
    if new_encoding is None:
        return decision
    logger.debug(
        "changing encoding from %s to %s", decision.encoding.name, new_encoding.name
    )
    return choose(decision, EncodingDecision(new_encoding, Confidence.CERTAIN))
