"""Tests for the ZIP integrity classifier."""

import zipfile
from pathlib import Path

from treescan.models import OutcomeKind
from treescan.processors.zip_check import (
    CORRUPTED,
    PASSWORD_PROTECTED,
    VALID,
    check_zip,
    make_predicate,
    zip_processor,
)


def _valid_zip(path: Path, compression=zipfile.ZIP_DEFLATED) -> Path:
    with zipfile.ZipFile(path, "w", compression=compression) as zf:
        zf.writestr("test.txt", "Hello, World!")
        zf.writestr("folder/nested.txt", "Nested content")
    return path


def _mark_encrypted(path: Path) -> None:
    """Set the encryption bit in the local and central headers of a one-member archive."""
    data = bytearray(path.read_bytes())
    data[6] |= 0x1
    central = data.find(b"PK\x01\x02")
    data[central + 8] |= 0x1
    path.write_bytes(bytes(data))


def test_valid_zip(tmp_path):
    out = check_zip(_valid_zip(tmp_path / "valid.zip"))
    assert out.kind == OutcomeKind.SUCCESS
    assert out.label == VALID


def test_stored_zip(tmp_path):
    out = check_zip(_valid_zip(tmp_path / "stored.zip", zipfile.ZIP_STORED))
    assert out.kind == OutcomeKind.SUCCESS


def test_empty_zip_is_valid(tmp_path):
    p = tmp_path / "empty.zip"
    with zipfile.ZipFile(p, "w"):
        pass
    assert check_zip(p).kind == OutcomeKind.SUCCESS


def test_large_zip(tmp_path):
    p = tmp_path / "large.zip"
    with zipfile.ZipFile(p, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("large.txt", b"A" * (1024 * 1024))
    assert check_zip(p).kind == OutcomeKind.SUCCESS


def test_corrupted_zip(tmp_path):
    p = tmp_path / "corrupted.zip"
    p.write_bytes(b"PK\x03\x04" + bytes(100))
    out = check_zip(p)
    assert out.kind == OutcomeKind.FAILED
    assert out.label == CORRUPTED
    assert "Invalid zip format" in out.detail or "Cannot read" in out.detail


def test_non_zip_file(tmp_path):
    p = tmp_path / "notzip.zip"
    p.write_text("This is not a ZIP file")
    out = check_zip(p)
    assert out.kind == OutcomeKind.FAILED
    assert "Invalid zip format" in out.detail


def test_missing_file(tmp_path):
    out = check_zip(tmp_path / "nonexistent.zip")
    assert out.kind == OutcomeKind.FAILED
    assert "Cannot open file" in out.detail


def test_bad_crc(tmp_path):
    """Damaged member data is caught by the CRC check."""
    p = tmp_path / "crc.zip"
    with zipfile.ZipFile(p, "w", compression=zipfile.ZIP_STORED) as zf:
        zf.writestr("test.txt", "Hello, World!")
    p.write_bytes(p.read_bytes().replace(b"Hello, World!", b"Jello, World!"))
    out = check_zip(p)
    assert out.kind == OutcomeKind.FAILED
    assert "test.txt" in out.detail


def test_password_protected_is_skipped(tmp_path):
    p = tmp_path / "secret.zip"
    with zipfile.ZipFile(p, "w", compression=zipfile.ZIP_STORED) as zf:
        zf.writestr("secret.txt", "classified")
    _mark_encrypted(p)
    out = check_zip(p)
    assert out.kind == OutcomeKind.SKIPPED
    assert out.label == PASSWORD_PROTECTED
    assert out.icon == "🔐"


def test_path_with_spaces(tmp_path):
    out = check_zip(_valid_zip(tmp_path / "file with spaces.zip"))
    assert out.kind == OutcomeKind.SUCCESS


def test_predicate_extensions(tmp_path):
    (tmp_path / "a.ZIP").write_bytes(b"")
    (tmp_path / "b.jar").write_bytes(b"")
    (tmp_path / "dir.zip").mkdir()
    default = make_predicate()
    assert default(tmp_path / "a.ZIP")
    assert not default(tmp_path / "b.jar")
    assert not default(tmp_path / "dir.zip")
    both = make_predicate(["zip", ".jar"])
    assert both(tmp_path / "b.jar")


def test_processor_labels():
    proc = zip_processor()
    assert proc.name == "check-zip"
    assert proc.flag_prompt
    assert proc.summary_labels[OutcomeKind.FAILED] == "Corrupted files"
