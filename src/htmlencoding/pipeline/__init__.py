"""Sniffing pipeline stages and shared types."""

from __future__ import annotations

import dataclasses
import types
from collections.abc import Mapping
from dataclasses import field
from typing import NamedTuple

from htmlencoding.enums import Confidence
from htmlencoding.registry import EncodingInfo

#: A named encoding from the registry.
StringEncoding = EncodingInfo


@dataclasses.dataclass(frozen=True, slots=True)
class EncodingDecision:
    """An encoding tagged with how much later evidence may override it."""

    encoding: EncodingInfo
    confidence: Confidence

    def to_dict(self) -> dict[str, str]:
        """Convert this decision to a plain dict.

        :returns: A dict with ``'encoding'`` and ``'confidence'`` keys, both
            strings (the canonical encoding name and the lower-case
            confidence name).
        """
        return {
            "encoding": self.encoding.name,
            "confidence": self.confidence.name.lower(),
        }


class SniffResult(NamedTuple):
    """The decision together with the text decoded under it."""

    decision: EncodingDecision
    text: str


@dataclasses.dataclass(frozen=True, slots=True)
class ContentTypeHeader:
    """A parsed ``Content-Type`` value.

    *media_type* is lower-cased ``type/subtype``; parameter names are
    lower-cased and only the first occurrence of each name is kept.
    """

    media_type: str
    parameters: Mapping[str, str] = field(
        default_factory=lambda: types.MappingProxyType({})
    )

    @property
    def charset(self) -> str | None:
        """The raw ``charset`` parameter value, if present."""
        return self.parameters.get("charset")


class EncodingDecodeError(UnicodeDecodeError):
    """Raised when the stream cannot be decoded strictly with the chosen encoding.

    The :attr:`decision` that was reached is attached so the caller can
    log it and retry with a fallback, e.g. ``errors="replace"``.
    """

    def __init__(self, decision: EncodingDecision, exc: UnicodeDecodeError) -> None:
        super().__init__(exc.encoding, exc.object, exc.start, exc.end, exc.reason)
        self.decision = decision
