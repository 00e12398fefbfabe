"""
Content Classifier

Sniffs the leading bytes of a stored object to tell text from binary.
Known binary signatures win. Otherwise content that decodes as UTF-8,
carries a UTF-16 byte order mark, or is 8-bit text free of binary control
bytes is text, with the extension refining the MIME type through
``mimetypes``.
"""

import codecs
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Tuple

from pastebox.domain.errors import ClassificationError
from pastebox.domain.rendering.classifier import IContentClassifier
from pastebox.domain.rendering.value_objects import ContentType, top_level_type

logger = logging.getLogger(__name__)

SNIFF_LENGTH = 3072

OCTET_STREAM = "application/octet-stream"
TEXT_PLAIN = "text/plain"

# (offset, signature, mimetype)
_SIGNATURES: Tuple[Tuple[int, bytes, str], ...] = (
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"%PDF-", "application/pdf"),
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"\x1f\x8b", "application/gzip"),
    (0, b"BZh", "application/x-bzip2"),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (0, b"\xfd7zXZ\x00", "application/x-xz"),
    (0, b"\x7fELF", "application/x-elf"),
    (0, b"OggS", "application/ogg"),
    (0, b"ID3", "audio/mpeg"),
    (0, b"fLaC", "audio/flac"),
    (0, b"\x1aE\xdf\xa3", "video/webm"),
    (4, b"ftyp", "video/mp4"),
    (0, b"wOFF", "font/woff"),
    (0, b"wOF2", "font/woff2"),
    (0, b"\x00asm", "application/wasm"),
)

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)

# C0 controls other than BEL, BS, TAB, LF, VT, FF, CR and ESC, plus DEL.
_BINARY_CONTROL_BYTES = (
    bytes(range(0x01, 0x07)) + bytes(range(0x0E, 0x1B)) + bytes(range(0x1C, 0x20)) + b"\x7f"
)

TEXTUAL_APPLICATION_TYPES = frozenset({
    "application/json",
    "application/javascript",
    "application/xml",
    "application/x-sh",
    "application/x-python-code",
    "application/x-tex",
    "application/x-yaml",
    "application/yaml",
    "application/toml",
    "application/sql",
    "image/svg+xml",
})


class MimeSniffingClassifier(IContentClassifier):
    """
    IContentClassifier backed by byte signatures and ``mimetypes``.
    """

    def __init__(self, sniff_length: int = SNIFF_LENGTH):
        self.sniff_length = sniff_length

    def classify(self, path: Path) -> ContentType:
        try:
            with open(path, "rb") as handle:
                head = handle.read(self.sniff_length)
        except OSError as e:
            raise ClassificationError(f"Could not read {path.name}: {e}", e) from e

        return self.classify_bytes(head, path.name)

    def classify_bytes(self, head: bytes, filename: str = "") -> ContentType:
        if head[:4] == b"RIFF" and head[8:12] == b"WEBP":
            return ContentType("image/webp", OCTET_STREAM)

        signature_type = _match_signature(head)
        if signature_type is not None:
            return ContentType(signature_type, OCTET_STREAM)

        if not _looks_like_text(head):
            return ContentType(OCTET_STREAM)

        guessed = _guess_from_name(filename)
        if guessed is None or guessed == TEXT_PLAIN:
            return ContentType(TEXT_PLAIN)
        if top_level_type(guessed) == "text" or guessed in TEXTUAL_APPLICATION_TYPES:
            return ContentType(guessed, TEXT_PLAIN)
        # The bytes are text whatever the extension claims.
        return ContentType(TEXT_PLAIN)


def _match_signature(head: bytes) -> Optional[str]:
    for offset, signature, mimetype in _SIGNATURES:
        if head[offset:offset + len(signature)] == signature:
            return mimetype
    return None


def _looks_like_text(head: bytes) -> bool:
    if not head:
        return True
    if head.startswith(_UTF16_BOMS):
        return True
    if b"\x00" in head:
        return False

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        # final=False tolerates a multibyte sequence cut at the sniff boundary.
        decoder.decode(head, final=False)
    except UnicodeDecodeError:
        return _looks_like_legacy_text(head)
    return True


def _looks_like_legacy_text(head: bytes) -> bool:
    """Latin-1 or Windows-1252 text: no control bytes outside the usual whitespace."""
    return len(head.translate(None, _BINARY_CONTROL_BYTES)) == len(head)


def _guess_from_name(filename: str) -> Optional[str]:
    if not filename:
        return None
    guessed, _ = mimetypes.guess_type(filename, strict=False)
    return guessed
