from __future__ import annotations

import pytest

from htmlencoding.enums import Confidence
from htmlencoding.pipeline import EncodingDecision, EncodingDecodeError
from htmlencoding.pipeline.orchestrator import (
    choose,
    decode_stream,
    reconsider_encoding,
    run_pipeline,
    sniff,
)
from htmlencoding.registry import UTF_8, UTF_16LE, WINDOWS_1252, EncodingInfo, lookup

_KOI8_R = lookup("koi8-r")


def _decision(label: str, confidence: Confidence) -> EncodingDecision:
    return EncodingDecision(lookup(label), confidence)


# --- override policy ---


def test_choose_without_candidate_keeps_current():
    current = _decision("utf-8", Confidence.TENTATIVE)
    assert choose(current, None) is current
    assert choose(None, None) is None


def test_choose_first_candidate():
    candidate = _decision("utf-8", Confidence.TENTATIVE)
    assert choose(None, candidate) is candidate


def test_certain_overrides_tentative():
    current = _decision("windows-1252", Confidence.TENTATIVE)
    candidate = _decision("shift_jis", Confidence.CERTAIN)
    assert choose(current, candidate) is candidate


def test_tentative_overrides_tentative():
    current = _decision("windows-1252", Confidence.TENTATIVE)
    candidate = _decision("koi8-r", Confidence.TENTATIVE)
    assert choose(current, candidate) is candidate


@pytest.mark.parametrize("final", [Confidence.CERTAIN, Confidence.IRRELEVANT])
@pytest.mark.parametrize(
    "incoming", [Confidence.TENTATIVE, Confidence.CERTAIN, Confidence.IRRELEVANT]
)
def test_final_decisions_are_never_replaced(final, incoming):
    current = _decision("utf-8", final)
    assert choose(current, _decision("koi8-r", incoming)) is current


# --- sniff ---


def test_sniff_bom_reports_skip():
    decision, skip = sniff(b"\xef\xbb\xbfhello")
    assert decision == EncodingDecision(UTF_8, Confidence.CERTAIN)
    assert skip == 3


def test_sniff_empty_is_irrelevant():
    decision, skip = sniff(b"")
    assert decision == EncodingDecision(WINDOWS_1252, Confidence.IRRELEVANT)
    assert skip == 0


def test_sniff_default_is_tentative():
    decision, _ = sniff(b"<p>hello</p>")
    assert decision == EncodingDecision(WINDOWS_1252, Confidence.TENTATIVE)


def test_sniff_custom_default():
    decision, _ = sniff(b"<p>hello</p>", default_encoding="utf-8")
    assert decision == EncodingDecision(UTF_8, Confidence.TENTATIVE)


def test_sniff_respects_prescan_window():
    data = b"x" * 100 + b'<meta charset="koi8-r">'
    assert sniff(data, prescan_bytes=50)[0].encoding == WINDOWS_1252
    assert sniff(data, prescan_bytes=200)[0].encoding == _KOI8_R


def test_non_ascii_compatible_transport_skips_prescan():
    data = '<meta charset="koi8-r">hi'.encode("utf-16-le")
    decision, _ = sniff(data, "text/html; charset=utf-16le")
    assert decision == EncodingDecision(UTF_16LE, Confidence.TENTATIVE)


def test_non_ascii_compatible_default_still_prescans():
    data = b'<meta charset="koi8-r">'
    decision, _ = sniff(data, default_encoding="iso-2022-jp")
    assert decision == EncodingDecision(_KOI8_R, Confidence.CERTAIN)


@pytest.mark.parametrize("prescan_bytes", [0, -1, True, 1.5, "1024"])
def test_invalid_prescan_bytes(prescan_bytes):
    with pytest.raises(ValueError, match="prescan_bytes"):
        sniff(b"abc", prescan_bytes=prescan_bytes)


def test_unknown_default_encoding():
    with pytest.raises(ValueError, match="unknown default encoding"):
        sniff(b"abc", default_encoding="bogus")


def test_unregistered_default_encoding_instance():
    custom = EncodingInfo("x-custom", "utf-8", ("x-custom",))
    with pytest.raises(ValueError, match="unknown default encoding"):
        sniff(b"abc", default_encoding=custom)


def test_default_encoding_instance_resolves_to_registry_entry():
    stand_in = EncodingInfo("KOI8-R", "latin-1", ())
    decision, _ = sniff(b"<p>abc</p>", default_encoding=stand_in)
    assert decision.encoding is _KOI8_R
    assert decision.encoding.python_codec == "koi8_r"


# --- decoding ---


def test_decode_stream_skips_bom():
    decision = EncodingDecision(UTF_8, Confidence.CERTAIN)
    assert decode_stream(b"\xef\xbb\xbfhi", decision, skip=3) == "hi"


def test_legacy_decode_failure_without_lossy_flag(strict_windows1252):
    decision = EncodingDecision(WINDOWS_1252, Confidence.TENTATIVE)
    with pytest.raises(EncodingDecodeError) as excinfo:
        decode_stream(b"caf\x81", decision)
    assert excinfo.value.decision is decision
    assert excinfo.value.start == 3
    assert isinstance(excinfo.value, UnicodeDecodeError)


def test_legacy_decode_substitutes_with_lossy_flag(lossy_windows1252):
    decision = EncodingDecision(WINDOWS_1252, Confidence.TENTATIVE)
    assert decode_stream(b"caf\x81", decision) == "caf�"


def test_multibyte_decode_stays_strict_with_lossy_flag(lossy_windows1252):
    decision = EncodingDecision(UTF_8, Confidence.CERTAIN)
    with pytest.raises(EncodingDecodeError):
        decode_stream(b"caf\xff", decision)


def test_explicit_errors_handler_wins(strict_windows1252):
    decision = EncodingDecision(WINDOWS_1252, Confidence.TENTATIVE)
    assert decode_stream(b"caf\x81", decision, errors="ignore") == "caf"


def test_run_pipeline_redecodes_from_start():
    body = "<p>Привет</p>".encode("koi8-r")
    data = b'<meta charset="koi8-r">' + body
    decision, text = run_pipeline(data, "text/html; charset=windows-1252")
    assert decision == EncodingDecision(_KOI8_R, Confidence.CERTAIN)
    assert text == data.decode("koi8_r")


def test_run_pipeline_text_input_is_irrelevant():
    decision, text = run_pipeline("<p>already text</p>")
    assert decision == EncodingDecision(UTF_8, Confidence.IRRELEVANT)
    assert text == "<p>already text</p>"


# --- changing the encoding later ---


def test_reconsider_switches_tentative_decision():
    current = _decision("windows-1252", Confidence.TENTATIVE)
    assert reconsider_encoding(current, "koi8-r") == EncodingDecision(
        _KOI8_R, Confidence.CERTAIN
    )


def test_reconsider_accepts_bytes():
    current = _decision("windows-1252", Confidence.TENTATIVE)
    assert reconsider_encoding(current, b"KOI8-R").encoding == _KOI8_R


def test_reconsider_same_encoding_becomes_certain():
    current = _decision("windows-1252", Confidence.TENTATIVE)
    assert reconsider_encoding(current, "cp1252") == EncodingDecision(
        WINDOWS_1252, Confidence.CERTAIN
    )


@pytest.mark.parametrize("final", [Confidence.CERTAIN, Confidence.IRRELEVANT])
def test_reconsider_never_overrides_final(final):
    current = _decision("utf-8", final)
    assert reconsider_encoding(current, "koi8-r") is current


def test_reconsider_under_utf16_only_raises_confidence():
    current = _decision("utf-16le", Confidence.TENTATIVE)
    assert reconsider_encoding(current, "koi8-r") == EncodingDecision(
        UTF_16LE, Confidence.CERTAIN
    )


def test_reconsider_utf16_label_means_utf8():
    current = _decision("windows-1252", Confidence.TENTATIVE)
    assert reconsider_encoding(current, "utf-16").encoding == UTF_8


@pytest.mark.parametrize("label", [None, "", "bogus", "é"])
def test_reconsider_ignores_unusable_labels(label):
    current = _decision("windows-1252", Confidence.TENTATIVE)
    assert reconsider_encoding(current, label) is current
