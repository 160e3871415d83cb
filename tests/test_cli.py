import io
import json
import logging
import zipfile
from pathlib import Path

import pytest

from oscdeob.logging_config import colorize_text
from oscdeob.main import main


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    saved = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in saved:
            root.removeHandler(handler)
            handler.close()
    for handler in saved:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def test_decode_prints_plaintext(capsys) -> None:
    assert main(["decode", "lA26", "QQ"]) == 0
    out = capsys.readouterr().out
    assert out.splitlines() == ["Ab", ""]


def test_decode_hex(capsys) -> None:
    assert main(["decode", "--hex", "lA26QQ"]) == 0
    assert capsys.readouterr().out.strip() == "416200"


def test_decode_trace(capsys) -> None:
    assert main(["decode", "--trace", "lA?A"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["input"] == "lA?A"
    assert [pair["value"] for pair in payload["pairs"]] == [0x41, 0x41]
    assert payload["pairs"][1]["found"] == [False, True]


def test_decode_from_stdin(capsys, monkeypatch: pytest.MonkeyPatch, obfuscate) -> None:
    lines = [obfuscate(b"first").decode(), obfuscate(b"second").decode()]
    monkeypatch.setattr("sys.stdin", io.StringIO("\n".join(lines) + "\n"))
    assert main(["decode", "--stdin"]) == 0
    assert capsys.readouterr().out.splitlines() == ["first", "second"]


def test_decode_strict_failure(capsys) -> None:
    assert main(["decode", "--strict", "lA?A"]) == 1
    assert "unknown symbol" in capsys.readouterr().err


def test_decode_strict_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OSCDEOB_STRICT", "1")
    assert main(["decode", "lA?A"]) == 1


def test_decode_without_values(capsys) -> None:
    assert main(["decode"]) == 1


def test_alphabet_listing(capsys) -> None:
    assert main(["alphabet"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 16
    assert lines[0] == " 0  Q  0x51"
    assert lines[15] == "15  f  0x66"


def test_unknown_command_is_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["encode", "x"])
    assert excinfo.value.code == 2


def _archive(tmp_path: Path) -> Path:
    path = tmp_path / "export.osb"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("data/form.osc", "<xml/>")
    return path


def test_list_osb(tmp_path: Path, capsys) -> None:
    assert main(["list-osb", str(_archive(tmp_path))]) == 0
    out = capsys.readouterr().out
    assert "data/form.osc" in out
    assert out.startswith("-- ")


def test_unzip_osb_uses_obfuscated_key(
    tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch, obfuscate
) -> None:
    monkeypatch.setenv("OSB_KEY", obfuscate(b"hunter2").decode())
    target = tmp_path / "out"
    assert main(["unzip-osb", str(_archive(tmp_path)), "-d", str(target)]) == 0
    assert (target / "data" / "form.osc").read_text(encoding="utf-8") == "<xml/>"
    assert "[OK]" in capsys.readouterr().out


def test_unzip_osb_without_key(tmp_path: Path, capsys) -> None:
    assert main(["unzip-osb", str(_archive(tmp_path)), "-d", str(tmp_path / "out")]) == 1
    assert "OSB_KEY" in capsys.readouterr().err


def test_unzip_osb_missing_file(tmp_path: Path) -> None:
    assert main(["unzip-osb", str(tmp_path / "nope.osb"), "-p", "x"]) == 1


def test_log_file_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    log_file = tmp_path / "logs" / "oscdeob.log"
    monkeypatch.setenv("OSCDEOB_LOG_FILE", str(log_file))
    assert main(["--verbose", "decode", "lA26"]) == 0
    assert "decoded 2 pair(s) in place" in log_file.read_text(encoding="utf-8")


ENCRYPTED_OSB = Path(__file__).resolve().parent / "fixtures" / "encrypted.osb"


def test_unzip_encrypted_osb_with_obfuscated_key(
    tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch, obfuscate
) -> None:
    monkeypatch.setenv("OSB_KEY", obfuscate(b"hunter2").decode())
    target = tmp_path / "out"
    assert main(["unzip-osb", str(ENCRYPTED_OSB), "-d", str(target)]) == 0
    assert (target / "forms" / "Form1.osc").read_text(encoding="utf-8") == "<xml/>"


def test_unzip_encrypted_osb_wrong_password(tmp_path: Path, capsys) -> None:
    assert main(["unzip-osb", str(ENCRYPTED_OSB), "-p", "wrong", "-d", str(tmp_path)]) == 1
    assert "Bad password" in capsys.readouterr().err


def test_list_encrypted_osb(capsys) -> None:
    assert main(["list-osb", str(ENCRYPTED_OSB)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert all(line.startswith("-e ") for line in lines)


def test_unzip_osb_corrupt_member_header(tmp_path: Path, capsys) -> None:
    archive = _archive(tmp_path)
    data = bytearray(archive.read_bytes())
    data[:4] = b"XXXX"
    archive.write_bytes(bytes(data))
    assert main(["unzip-osb", str(archive), "-p", "x", "-d", str(tmp_path / "out")]) == 1
    assert "Bad magic number" in capsys.readouterr().err


def test_colorize_text() -> None:
    assert colorize_text("ok", "green") == "\033[32mok\033[0m"
    assert colorize_text("ok", "plaid") == "\033[0mok\033[0m"


def test_unzip_osb_escaping_member_exits_nonzero(tmp_path: Path, capsys) -> None:
    path = tmp_path / "evil.osb"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("../escape.txt", "x")
        zf.writestr("ok.txt", "fine")
    assert main(["unzip-osb", str(path), "-p", "x", "-d", str(tmp_path / "out")]) == 1
    assert "[ERR] ../escape.txt - Error: outside target directory" in capsys.readouterr().out
    assert (tmp_path / "out" / "ok.txt").exists()
