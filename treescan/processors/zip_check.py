"""ZIP integrity check: opens every archive, flags encrypted ones, verifies CRCs."""

import zipfile
import zlib
from pathlib import Path
from typing import Iterable

from ..models import Outcome, OutcomeKind
from .base import Processor

DEFAULT_EXTENSIONS = (".zip",)

VALID = "VALID"
PASSWORD_PROTECTED = "PASSWORD PROTECTED"
CORRUPTED = "CORRUPTED"
UNSUPPORTED = "UNSUPPORTED"

_ENCRYPTED_FLAG = 0x1


def _corrupted(message: str) -> Outcome:
    return Outcome.failed(message, label=CORRUPTED)


def make_predicate(extensions: Iterable[str] = DEFAULT_EXTENSIONS):
    """Regular files whose suffix (case-insensitive) is one of extensions."""
    exts = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions}

    def predicate(path: Path) -> bool:
        return path.suffix.lower() in exts and path.is_file()

    return predicate


def check_zip(path: Path) -> Outcome:
    """Classify one archive: VALID, PASSWORD PROTECTED or CORRUPTED."""
    try:
        fh = open(path, "rb")
    except OSError as e:
        return _corrupted(f"Cannot open file: {e}")

    with fh:
        try:
            archive = zipfile.ZipFile(fh)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError, ValueError) as e:
            return _corrupted(f"Invalid zip format: {e}")

        with archive:
            # Encrypted members cannot be CRC-checked without the password.
            for info in archive.infolist():
                if info.flag_bits & _ENCRYPTED_FLAG:
                    return Outcome.skipped("password protected", label=PASSWORD_PROTECTED, icon="🔐")
            try:
                bad = archive.testzip()
            except (zipfile.BadZipFile, zlib.error, OSError, EOFError, NotImplementedError, RuntimeError) as e:
                return _corrupted(f"Cannot read archive contents: {e}")
            if bad is not None:
                return _corrupted(f"Cannot read file {bad}: bad CRC or header")

    return Outcome.success(label=VALID)


def zip_processor(extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> Processor:
    return Processor(
        name="check-zip",
        title="Validation",
        noun="files",
        predicate=make_predicate(extensions),
        classify=check_zip,
        summary_labels={
            OutcomeKind.SUCCESS: "Intact files",
            OutcomeKind.FAILED: "Corrupted files",
            OutcomeKind.SKIPPED: "Skipped files (password protected or unsupported)",
        },
        flag_prompt="Do you want to delete all corrupted zip files?",
    )
