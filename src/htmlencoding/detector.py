"""EncodingSniffer: streaming encoding determination."""

from __future__ import annotations

from htmlencoding._utils import (
    DEFAULT_ENCODING,
    DEFAULT_PRESCAN_BYTES,
    _resolve_default_encoding,
    _validate_prescan_bytes,
)
from htmlencoding.pipeline import EncodingDecision, SniffResult
from htmlencoding.pipeline.orchestrator import decode_stream, sniff
from htmlencoding.pipeline.prescan import find_declaration
from htmlencoding.registry import EncodingInfo


class EncodingSniffer:
    """Streaming encoding sniffer.

    Implements a feed/close pattern: the encoding decision becomes available
    as soon as enough bytes have arrived to make it (a BOM, a meta
    declaration inside the prescan window, or a full window), while the text
    is decoded from the whole buffered stream on :meth:`close`.

    .. code::

            sniffer = EncodingSniffer(content_type=headers.get("Content-Type"))
            for chunk in response.iter_bytes():
                sniffer.feed(chunk)
            decision, text = sniffer.close()
    """

    def __init__(
        self,
        content_type: str | None = None,
        default_encoding: str | EncodingInfo = DEFAULT_ENCODING,
        prescan_bytes: int = DEFAULT_PRESCAN_BYTES,
        errors: str | None = None,
    ) -> None:
        """Initialize the sniffer.

        :param content_type: The transport ``Content-Type`` header value.
        :param default_encoding: Encoding used when nothing is declared.
        :param prescan_bytes: Size of the meta prescan window.
        :param errors: Codec error handler overriding the default decode
            policy at :meth:`close`.
        """
        _validate_prescan_bytes(prescan_bytes)
        self._content_type = content_type
        self._default_encoding = _resolve_default_encoding(default_encoding)
        self._prescan_bytes = prescan_bytes
        self._errors = errors
        self._buffer = bytearray()
        self._decision: EncodingDecision | None = None
        self._skip = 0
        self._closed = False
        self._result: SniffResult | None = None

    def feed(self, byte_str: bytes | bytearray) -> None:
        """Feed the next chunk of the document.

        :raises ValueError: If called after :meth:`close` without a
            :meth:`reset`.
        """
        if self._closed:
            msg = "feed() called after close() without reset()"
            raise ValueError(msg)
        self._buffer.extend(byte_str)
        if self._decision is None:
            self._try_incremental_sniff()

    def _try_incremental_sniff(self) -> None:
        buf_len = len(self._buffer)
        # Two or three bytes may still be a partial BOM.
        if buf_len < 3:
            return
        decision, skip = self._sniff()
        # A tentative answer may still change until the prescan window is full.
        if buf_len >= self._prescan_bytes or (
            decision.confidence.is_final and (skip or self._declaration_closed())
        ):
            self._decision, self._skip = decision, skip

    def _declaration_closed(self) -> bool:
        # Later attributes of an unfinished <meta> tag may still override it.
        _, end = find_declaration(bytes(self._buffer), self._prescan_bytes)
        return end is not None

    def _sniff(self) -> tuple[EncodingDecision, int]:
        return sniff(
            bytes(self._buffer),
            self._content_type,
            default_encoding=self._default_encoding,
            prescan_bytes=self._prescan_bytes,
        )

    def close(self) -> SniffResult:
        """Finalize sniffing and decode everything fed so far.

        :returns: A :class:`SniffResult` of the decision and the text.
        :raises EncodingDecodeError: If strict decoding fails.
        """
        if self._result is None:
            self._closed = True
            if self._decision is None:
                self._decision, self._skip = self._sniff()
            text = decode_stream(
                bytes(self._buffer), self._decision, skip=self._skip, errors=self._errors
            )
            self._result = SniffResult(self._decision, text)
        return self._result

    def reset(self) -> None:
        """Reset the sniffer to its initial state for reuse."""
        self._buffer = bytearray()
        self._decision = None
        self._skip = 0
        self._closed = False
        self._result = None

    @property
    def done(self) -> bool:
        """Whether the encoding decision is settled and further bytes cannot change it."""
        return self._decision is not None

    @property
    def decision(self) -> EncodingDecision | None:
        """The settled decision, or ``None`` while it may still change."""
        return self._decision
