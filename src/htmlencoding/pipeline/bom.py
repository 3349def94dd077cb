"""Stage 1: BOM (Byte Order Mark) detection."""

from __future__ import annotations

from htmlencoding.enums import Confidence
from htmlencoding.pipeline import EncodingDecision
from htmlencoding.registry import UTF_8, UTF_16BE, UTF_16LE, EncodingInfo

_BOMS: tuple[tuple[bytes, EncodingInfo], ...] = (
    (b"\xef\xbb\xbf", UTF_8),
    (b"\xfe\xff", UTF_16BE),
    (b"\xff\xfe", UTF_16LE),
)

_BOM_LENGTHS: dict[EncodingInfo, int] = {enc: len(bom) for bom, enc in _BOMS}


def detect_bom(data: bytes) -> EncodingDecision | None:
    """Check for a BOM at the start of data. Returns a certain decision or None."""
    head = bytes(data[:3])
    for bom_bytes, encoding in _BOMS:
        if head.startswith(bom_bytes):
            return EncodingDecision(encoding, Confidence.CERTAIN)
    return None


def bom_length(encoding: EncodingInfo) -> int:
    """Return the number of bytes in *encoding*'s BOM, or 0 if it has none."""
    return _BOM_LENGTHS.get(encoding, 0)
