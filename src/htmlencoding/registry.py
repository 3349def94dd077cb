"""Encoding registry and capability table.

Names and labels follow the WHATWG Encoding Standard
(https://encoding.spec.whatwg.org/#names-and-labels) with these deviations,
all of which keep an encoding Python decodes natively instead of folding it
into another one:

* ISO-8859-1 and ISO-8859-9 stay distinct from windows-1252 and windows-1254.
* ISO-2022-KR and HZ-GB-2312 are real (non ASCII-compatible) encodings rather
  than labels of the "replacement" encoding.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import field

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class EncodingInfo:
    """A named character encoding known to the registry.

    Two instances are equal when their canonical names are equal; the
    remaining fields are metadata derived from the name.
    """

    name: str
    python_codec: str = field(compare=False)
    labels: tuple[str, ...] = field(compare=False, repr=False)
    ascii_compatible: bool = field(default=True, compare=False, repr=False)
    is_single_byte: bool = field(default=False, compare=False, repr=False)

    def __str__(self) -> str:
        return self.name


def _single_byte(name: str, python_codec: str, labels: tuple[str, ...]) -> EncodingInfo:
    return EncodingInfo(name, python_codec, labels, is_single_byte=True)


REGISTRY: tuple[EncodingInfo, ...] = (
    EncodingInfo(
        "UTF-8",
        "utf-8",
        (
            "unicode-1-1-utf-8",
            "unicode11utf8",
            "unicode20utf8",
            "utf-8",
            "utf8",
            "x-unicode20utf8",
        ),
    ),
    # Legacy single-byte encodings
    _single_byte("IBM866", "cp866", ("866", "cp866", "csibm866", "ibm866")),
    _single_byte(
        "ISO-8859-1",
        "latin-1",
        (
            "cp819",
            "csisolatin1",
            "ibm819",
            "iso-8859-1",
            "iso-ir-100",
            "iso8859-1",
            "iso88591",
            "iso_8859-1",
            "iso_8859-1:1987",
            "l1",
            "latin1",
        ),
    ),
    _single_byte(
        "ISO-8859-2",
        "iso8859_2",
        (
            "csisolatin2",
            "iso-8859-2",
            "iso-ir-101",
            "iso8859-2",
            "iso88592",
            "iso_8859-2",
            "iso_8859-2:1987",
            "l2",
            "latin2",
        ),
    ),
    _single_byte(
        "ISO-8859-3",
        "iso8859_3",
        (
            "csisolatin3",
            "iso-8859-3",
            "iso-ir-109",
            "iso8859-3",
            "iso88593",
            "iso_8859-3",
            "iso_8859-3:1988",
            "l3",
            "latin3",
        ),
    ),
    _single_byte(
        "ISO-8859-4",
        "iso8859_4",
        (
            "csisolatin4",
            "iso-8859-4",
            "iso-ir-110",
            "iso8859-4",
            "iso88594",
            "iso_8859-4",
            "iso_8859-4:1988",
            "l4",
            "latin4",
        ),
    ),
    _single_byte(
        "ISO-8859-5",
        "iso8859_5",
        (
            "csisolatincyrillic",
            "cyrillic",
            "iso-8859-5",
            "iso-ir-144",
            "iso8859-5",
            "iso88595",
            "iso_8859-5",
            "iso_8859-5:1988",
        ),
    ),
    _single_byte(
        "ISO-8859-6",
        "iso8859_6",
        (
            "arabic",
            "asmo-708",
            "csiso88596e",
            "csiso88596i",
            "csisolatinarabic",
            "ecma-114",
            "iso-8859-6",
            "iso-8859-6-e",
            "iso-8859-6-i",
            "iso-ir-127",
            "iso8859-6",
            "iso88596",
            "iso_8859-6",
            "iso_8859-6:1987",
        ),
    ),
    _single_byte(
        "ISO-8859-7",
        "iso8859_7",
        (
            "csisolatingreek",
            "ecma-118",
            "elot_928",
            "greek",
            "greek8",
            "iso-8859-7",
            "iso-ir-126",
            "iso8859-7",
            "iso88597",
            "iso_8859-7",
            "iso_8859-7:1987",
            "sun_eu_greek",
        ),
    ),
    _single_byte(
        "ISO-8859-8",
        "iso8859_8",
        (
            "csiso88598e",
            "csisolatinhebrew",
            "hebrew",
            "iso-8859-8",
            "iso-8859-8-e",
            "iso-ir-138",
            "iso8859-8",
            "iso88598",
            "iso_8859-8",
            "iso_8859-8:1988",
            "visual",
        ),
    ),
    _single_byte("ISO-8859-8-I", "iso8859_8", ("csiso88598i", "iso-8859-8-i", "logical")),
    _single_byte(
        "ISO-8859-9",
        "iso8859_9",
        (
            "csisolatin5",
            "iso-8859-9",
            "iso-ir-148",
            "iso8859-9",
            "iso88599",
            "iso_8859-9",
            "iso_8859-9:1989",
            "l5",
            "latin5",
        ),
    ),
    _single_byte(
        "ISO-8859-10",
        "iso8859_10",
        (
            "csisolatin6",
            "iso-8859-10",
            "iso-ir-157",
            "iso8859-10",
            "iso885910",
            "l6",
            "latin6",
        ),
    ),
    _single_byte("ISO-8859-13", "iso8859_13", ("iso-8859-13", "iso8859-13", "iso885913")),
    _single_byte("ISO-8859-14", "iso8859_14", ("iso-8859-14", "iso8859-14", "iso885914")),
    _single_byte(
        "ISO-8859-15",
        "iso8859_15",
        (
            "csisolatin9",
            "iso-8859-15",
            "iso8859-15",
            "iso885915",
            "iso_8859-15",
            "l9",
        ),
    ),
    _single_byte("ISO-8859-16", "iso8859_16", ("iso-8859-16",)),
    _single_byte("KOI8-R", "koi8_r", ("cskoi8r", "koi", "koi8", "koi8-r", "koi8_r")),
    _single_byte("KOI8-U", "koi8_u", ("koi8-ru", "koi8-u")),
    _single_byte(
        "macintosh", "mac_roman", ("csmacintosh", "mac", "macintosh", "x-mac-roman")
    ),
    _single_byte(
        "windows-874",
        "cp874",
        (
            "dos-874",
            "iso-8859-11",
            "iso8859-11",
            "iso885911",
            "tis-620",
            "windows-874",
        ),
    ),
    _single_byte("windows-1250", "cp1250", ("cp1250", "windows-1250", "x-cp1250")),
    _single_byte("windows-1251", "cp1251", ("cp1251", "windows-1251", "x-cp1251")),
    _single_byte(
        "windows-1252",
        "cp1252",
        (
            "ansi_x3.4-1968",
            "ascii",
            "cp1252",
            "us-ascii",
            "windows-1252",
            "x-cp1252",
        ),
    ),
    _single_byte("windows-1253", "cp1253", ("cp1253", "windows-1253", "x-cp1253")),
    _single_byte("windows-1254", "cp1254", ("cp1254", "windows-1254", "x-cp1254")),
    _single_byte("windows-1255", "cp1255", ("cp1255", "windows-1255", "x-cp1255")),
    _single_byte("windows-1256", "cp1256", ("cp1256", "windows-1256", "x-cp1256")),
    _single_byte("windows-1257", "cp1257", ("cp1257", "windows-1257", "x-cp1257")),
    _single_byte("windows-1258", "cp1258", ("cp1258", "windows-1258", "x-cp1258")),
    _single_byte(
        "x-mac-cyrillic", "mac_cyrillic", ("x-mac-cyrillic", "x-mac-ukrainian")
    ),
    # Legacy multi-byte Chinese (simplified)
    EncodingInfo(
        "GBK",
        "gb18030",
        (
            "chinese",
            "csgb2312",
            "csiso58gb231280",
            "gb2312",
            "gb_2312",
            "gb_2312-80",
            "gbk",
            "iso-ir-58",
            "x-gbk",
        ),
    ),
    EncodingInfo("gb18030", "gb18030", ("gb18030",)),
    EncodingInfo("HZ-GB-2312", "hz", ("hz-gb-2312",), ascii_compatible=False),
    # Legacy multi-byte Chinese (traditional)
    EncodingInfo(
        "Big5", "big5hkscs", ("big5", "big5-hkscs", "cn-big5", "csbig5", "x-x-big5")
    ),
    # Legacy multi-byte Japanese
    EncodingInfo("EUC-JP", "euc_jp", ("cseucpkdfmtjapanese", "euc-jp", "x-euc-jp")),
    EncodingInfo(
        "ISO-2022-JP",
        "iso2022_jp",
        ("csiso2022jp", "iso-2022-jp"),
        ascii_compatible=False,
    ),
    EncodingInfo(
        "Shift_JIS",
        "cp932",
        (
            "csshiftjis",
            "ms932",
            "ms_kanji",
            "shift-jis",
            "shift_jis",
            "sjis",
            "windows-31j",
            "x-sjis",
        ),
    ),
    # Legacy multi-byte Korean
    EncodingInfo(
        "EUC-KR",
        "cp949",
        (
            "cseuckr",
            "csksc56011987",
            "euc-kr",
            "iso-ir-149",
            "korean",
            "ks_c_5601-1987",
            "ks_c_5601-1989",
            "ksc5601",
            "ksc_5601",
            "windows-949",
        ),
    ),
    EncodingInfo(
        "ISO-2022-KR",
        "iso2022_kr",
        ("csiso2022kr", "iso-2022-kr"),
        ascii_compatible=False,
    ),
    # UTF-16
    EncodingInfo(
        "UTF-16BE", "utf-16-be", ("unicodefffe", "utf-16be"), ascii_compatible=False
    ),
    EncodingInfo(
        "UTF-16LE",
        "utf-16-le",
        (
            "csunicode",
            "iso-10646-ucs-2",
            "ucs-2",
            "unicode",
            "unicodefeff",
            "utf-16",
            "utf-16le",
        ),
        ascii_compatible=False,
    ),
)

_BY_LABEL: dict[str, EncodingInfo] = {
    label: info for info in REGISTRY for label in info.labels
}
_BY_NAME: dict[str, EncodingInfo] = {info.name: info for info in REGISTRY}

UTF_8: EncodingInfo = _BY_NAME["UTF-8"]
UTF_16BE: EncodingInfo = _BY_NAME["UTF-16BE"]
UTF_16LE: EncodingInfo = _BY_NAME["UTF-16LE"]
WINDOWS_1252: EncodingInfo = _BY_NAME["windows-1252"]

_UTF16_ENCODINGS: frozenset[EncodingInfo] = frozenset({UTF_16BE, UTF_16LE})

_LABEL_WHITESPACE = "\t\n\x0c\r "


def lookup(label: str | bytes | None) -> EncodingInfo | None:
    """Return the encoding named by *label*, or ``None`` if it is not known.

    Leading and trailing ASCII whitespace is ignored and matching is ASCII
    case-insensitive.  Byte labels must be ASCII.
    """
    if not label:
        return None
    if isinstance(label, (bytes, bytearray)):
        try:
            label = bytes(label).decode("ascii")
        except UnicodeDecodeError:
            return None
    if not label.isascii():
        return None
    return _BY_LABEL.get(label.strip(_LABEL_WHITESPACE).lower())


def _as_info(encoding: EncodingInfo | str) -> EncodingInfo | None:
    if isinstance(encoding, EncodingInfo):
        return encoding
    return lookup(encoding)


def is_ascii_compatible(encoding: EncodingInfo | str) -> bool:
    """Return True if *encoding* is ASCII-compatible.

    An ASCII-compatible encoding maps the bytes 0x09, 0x0A, 0x0C, 0x0D,
    0x20-0x22, 0x26, 0x27, 0x2C-0x3F, 0x41-0x5A and 0x61-0x7A (ignoring
    trailing bytes of multi-byte sequences) to the same characters as
    windows-1252, which is what makes a raw-byte prescan meaningful.
    Unknown encodings are reported as not ASCII-compatible.
    """
    info = _as_info(encoding)
    return info is not None and info.ascii_compatible


def is_utf16(encoding: EncodingInfo | str) -> bool:
    """Return True if *encoding* is UTF-16BE or UTF-16LE."""
    return _as_info(encoding) in _UTF16_ENCODINGS


# Positions 0x81, 0x8D, 0x8F, 0x90 and 0x9D are unassigned in windows-1252.
_UNUSED_WINDOWS_1252_BYTES = b"\x81\x8d\x8f\x90\x9d"

_LOSSY_WINDOWS_1252: bool | None = None


def _probe_lossy_windows1252() -> bool:
    try:
        _UNUSED_WINDOWS_1252_BYTES.decode(WINDOWS_1252.python_codec)
    except UnicodeDecodeError:
        return False
    return True


def uses_lossy_windows1252_decoding() -> bool:
    """Return True if the windows-1252 codec accepts unassigned code points.

    The answer depends only on the interpreter's codec tables, so it is
    computed on first use and cached for the lifetime of the process.
    Threads racing on the first call compute the same value.
    """
    global _LOSSY_WINDOWS_1252  # noqa: PLW0603
    if _LOSSY_WINDOWS_1252 is None:
        _LOSSY_WINDOWS_1252 = _probe_lossy_windows1252()
        logger.debug("lossy windows-1252 decoding: %s", _LOSSY_WINDOWS_1252)
    return _LOSSY_WINDOWS_1252
