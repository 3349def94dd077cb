# tests/test_cli.py
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

from htmlencoding.cli import main


def test_cli_sniffs_file(tmp_path: Path):
    f = tmp_path / "page.html"
    f.write_bytes(b"<p>Hello world</p>")
    result = subprocess.run(
        [sys.executable, "-m", "htmlencoding.cli", str(f)],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert result.stdout.strip() == f"{f}: windows-1252 (tentative)"


def test_cli_meta_declaration(tmp_path: Path):
    f = tmp_path / "page.html"
    f.write_bytes('<meta charset="utf-8"><p>Héllo</p>'.encode())
    result = subprocess.run(
        [sys.executable, "-m", "htmlencoding.cli", str(f)],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "UTF-8 (certain)" in result.stdout


def test_cli_stdin():
    result = subprocess.run(
        [sys.executable, "-m", "htmlencoding.cli"],
        input=b"\xef\xbb\xbfHello",
        capture_output=True,
    )
    assert result.returncode == 0
    assert result.stdout.decode().strip() == "stdin: UTF-8 (certain)"


def test_cli_version():
    result = subprocess.run(
        [sys.executable, "-m", "htmlencoding.cli", "--version"],
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0
    assert "1.0.0" in result.stdout


def test_cli_minimal_flag(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    f = tmp_path / "page.html"
    f.write_bytes(b"<p>plain</p>")
    assert main(["--minimal", str(f)]) == 0
    assert capsys.readouterr().out == "windows-1252\n"


def test_cli_content_type(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    f = tmp_path / "page.html"
    f.write_bytes("<p>Привет</p>".encode("koi8-r"))
    assert main(["-t", "text/html; charset=koi8-r", str(f)]) == 0
    assert capsys.readouterr().out == f"{f}: KOI8-R (tentative)\n"


def test_cli_default_encoding(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    f = tmp_path / "page.html"
    f.write_bytes(b"<p>plain</p>")
    assert main(["-d", "utf-8", "--minimal", str(f)]) == 0
    assert capsys.readouterr().out == "UTF-8\n"


def test_cli_unknown_default_encoding(capsys: pytest.CaptureFixture[str]):
    with pytest.raises(SystemExit) as excinfo:
        main(["-d", "bogus"])
    assert excinfo.value.code == 2
    assert "unknown encoding" in capsys.readouterr().err


def test_cli_decode(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    f = tmp_path / "page.html"
    f.write_bytes(b'<meta charset="iso-8859-2">\xa3\xf3d\xbc')
    assert main(["--decode", str(f)]) == 0
    assert capsys.readouterr().out == '<meta charset="iso-8859-2">Łódź'


def test_cli_decode_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], strict_windows1252
):
    f = tmp_path / "page.html"
    f.write_bytes(b"<p>\x81</p>")
    assert main([str(f)]) == 1
    err = capsys.readouterr().err
    assert "not valid windows-1252" in err
    assert "at byte 3" in err


def test_cli_errors_handler(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], strict_windows1252
):
    f = tmp_path / "page.html"
    f.write_bytes(b"<p>\x81</p>")
    assert main(["--errors", "replace", str(f)]) == 0
    assert "windows-1252" in capsys.readouterr().out


def test_cli_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]):
    missing = tmp_path / "missing.html"
    assert main([str(missing)]) == 1
    assert str(missing) in capsys.readouterr().err


def test_cli_minimal_and_decode_are_exclusive():
    with pytest.raises(SystemExit):
        main(["--minimal", "--decode"])
