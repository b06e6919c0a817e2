# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

Pattern = tuple[Optional[int], ...]


def _pattern(*parts: Union[bytes, int]) -> Pattern:
    """Build a byte pattern from literal chunks; an int inserts that many wildcards."""
    out: list[Optional[int]] = []
    for part in parts:
        if isinstance(part, int):
            out.extend([None] * part)
        else:
            out.extend(part)
    return tuple(out)


@dataclass(frozen=True)
class FileType:
    """Result of content-based detection."""

    category: str
    type_name: str
    extension: Optional[str] = None
    description: str = ""

    def __str__(self) -> str:
        return f"{self.category}/{self.type_name}"


@dataclass(frozen=True)
class SignatureEntry:
    pattern: Pattern
    category: str
    type_name: str
    extension: Optional[str] = None
    offset: int = 0
    description: str = ""

    @property
    def end(self) -> int:
        """Number of leading bytes needed to test this entry."""
        return self.offset + len(self.pattern)

    def matches(self, buffer: bytes) -> bool:
        if len(buffer) < self.end:
            return False
        base = self.offset
        for i, expected in enumerate(self.pattern):
            if expected is not None and buffer[base + i] != expected:
                return False
        return True

    def covers(self, other: SignatureEntry) -> bool:
        """True if every buffer matching ``other`` also matches this entry."""
        fixed = {
            other.offset + i: b for i, b in enumerate(other.pattern) if b is not None
        }
        return all(
            fixed.get(self.offset + i) == b
            for i, b in enumerate(self.pattern)
            if b is not None
        )

    def as_file_type(self) -> FileType:
        return FileType(self.category, self.type_name, self.extension, self.description)


def _e(
    type_name: str,
    category: str,
    extension: Optional[str],
    pattern: Pattern,
    offset: int = 0,
    description: str = "",
) -> SignatureEntry:
    return SignatureEntry(pattern, category, type_name, extension, offset, description)


_ZIP = b"PK\x03\x04"
_JP2 = b"\x00\x00\x00\x0cjP  \r\n\x87\n"

# Order is precedence: first match wins. Containers (ZIP, RIFF, ISO-BMFF, JP2) list
# their specific members ahead of the bare container signature.
SIGNATURE_TABLE: tuple[SignatureEntry, ...] = (
    # ZIP-based formats; the member name sits at offset 30 of the first local header
    _e("epub", "document", ".epub", _pattern(_ZIP, 26, b"mimetypeapplication/epub+zip"), description="EPUB e-book"),
    _e("odt", "document", ".odt", _pattern(_ZIP, 26, b"mimetypeapplication/vnd.oasis.opendocument.text"), description="OpenDocument text"),
    _e("ods", "spreadsheet", ".ods", _pattern(_ZIP, 26, b"mimetypeapplication/vnd.oasis.opendocument.spreadsheet"), description="OpenDocument spreadsheet"),
    _e("odp", "presentation", ".odp", _pattern(_ZIP, 26, b"mimetypeapplication/vnd.oasis.opendocument.presentation"), description="OpenDocument presentation"),
    _e("ooxml", "document", ".docx", _pattern(_ZIP, 26, b"[Content_Types].xml"), description="Office Open XML"),
    _e("jar", "archive", ".jar", _pattern(_ZIP, 26, b"META-INF/"), description="Java archive"),
    _e("zip", "archive", ".zip", _pattern(_ZIP)),
    _e("zip", "archive", ".zip", _pattern(b"PK\x05\x06"), description="empty ZIP archive"),
    _e("zip", "archive", ".zip", _pattern(b"PK\x07\x08"), description="spanned ZIP archive"),
    # ISO base media file format: box size, then "ftyp" + brand
    _e("heic", "image", ".heic", _pattern(b"ftypheic"), offset=4),
    _e("heic", "image", ".heic", _pattern(b"ftypheix"), offset=4),
    _e("heif", "image", ".heif", _pattern(b"ftypmif1"), offset=4),
    _e("avif", "image", ".avif", _pattern(b"ftypavif"), offset=4),
    _e("m4a", "audio", ".m4a", _pattern(b"ftypM4A "), offset=4),
    _e("m4v", "video", ".m4v", _pattern(b"ftypM4V "), offset=4),
    _e("mov", "video", ".mov", _pattern(b"ftypqt  "), offset=4, description="QuickTime movie"),
    _e("3gp", "video", ".3gp", _pattern(b"ftyp3gp"), offset=4),
    _e("mp4", "video", ".mp4", _pattern(b"ftyp"), offset=4, description="ISO base media"),
    _e("mov", "video", ".mov", _pattern(b"moov"), offset=4, description="QuickTime movie"),
    # JPEG 2000
    _e("jp2", "image", ".jp2", _pattern(_JP2, 4, b"ftypjp2 "), description="JPEG 2000 Part 1"),
    _e("jpx", "image", ".jpx", _pattern(_JP2, 4, b"ftypjpx "), description="JPEG 2000 Part 2"),
    _e("jpm", "image", ".jpm", _pattern(_JP2, 4, b"ftypjpm "), description="JPEG 2000 Part 6"),
    _e("jp2", "image", ".jp2", _pattern(_JP2), description="JPEG 2000"),
    _e("j2k", "image", ".j2k", _pattern(b"\xff\x4f\xff\x51"), description="JPEG 2000 code stream"),
    # RIFF
    _e("webp", "image", ".webp", _pattern(b"RIFF", 4, b"WEBP")),
    _e("wav", "audio", ".wav", _pattern(b"RIFF", 4, b"WAVE")),
    _e("avi", "video", ".avi", _pattern(b"RIFF", 4, b"AVI ")),
    # images
    _e("png", "image", ".png", _pattern(b"\x89PNG\r\n\x1a\n")),
    _e("gif", "image", ".gif", _pattern(b"GIF87a")),
    _e("gif", "image", ".gif", _pattern(b"GIF89a")),
    _e("jpeg", "image", ".jpg", _pattern(b"\xff\xd8\xff")),
    _e("jxr", "image", ".jxr", _pattern(b"II\xbc"), description="JPEG XR"),
    _e("tiff", "image", ".tif", _pattern(b"II*\x00")),
    _e("tiff", "image", ".tif", _pattern(b"MM\x00*")),
    _e("psd", "image", ".psd", _pattern(b"8BPS"), description="Photoshop document"),
    _e("ico", "image", ".ico", _pattern(b"\x00\x00\x01\x00")),
    _e("bmp", "image", ".bmp", _pattern(b"BM")),
    # documents
    _e("pdf", "document", ".pdf", _pattern(b"%PDF-")),
    _e("ps", "document", ".ps", _pattern(b"%!PS")),
    _e("rtf", "document", ".rtf", _pattern(b"{\\rtf")),
    _e("ole", "document", ".doc", _pattern(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"), description="OLE2 compound document"),
    _e("xml", "data", ".xml", _pattern(b"<?xml")),
    # databases
    _e("sqlite", "database", ".sqlite", _pattern(b"SQLite format 3\x00")),
    # archives
    _e("7z", "archive", ".7z", _pattern(b"7z\xbc\xaf\x27\x1c")),
    _e("rar", "archive", ".rar", _pattern(b"Rar!\x1a\x07\x01\x00"), description="RAR 5"),
    _e("rar", "archive", ".rar", _pattern(b"Rar!\x1a\x07\x00"), description="RAR 1.5-4"),
    _e("gzip", "archive", ".gz", _pattern(b"\x1f\x8b")),
    _e("bzip2", "archive", ".bz2", _pattern(b"BZh")),
    _e("xz", "archive", ".xz", _pattern(b"\xfd7zXZ\x00")),
    _e("zstd", "archive", ".zst", _pattern(b"\x28\xb5\x2f\xfd")),
    _e("tar", "archive", ".tar", _pattern(b"ustar"), offset=257),
    # audio
    _e("flac", "audio", ".flac", _pattern(b"fLaC")),
    _e("ogg", "audio", ".ogg", _pattern(b"OggS")),
    _e("midi", "audio", ".mid", _pattern(b"MThd")),
    _e("mp3", "audio", ".mp3", _pattern(b"ID3")),
    _e("mp3", "audio", ".mp3", _pattern(b"\xff\xfb")),
    _e("aac", "audio", ".aac", _pattern(b"\xff\xf1")),
    _e("aac", "audio", ".aac", _pattern(b"\xff\xf9")),
    # video
    _e("mkv", "video", ".mkv", _pattern(b"\x1a\x45\xdf\xa3"), description="Matroska / WebM"),
    _e("flv", "video", ".flv", _pattern(b"FLV\x01")),
    _e("mpeg", "video", ".mpg", _pattern(b"\x00\x00\x01\xba")),
    _e("mpeg", "video", ".mpg", _pattern(b"\x00\x00\x01\xb3")),
    _e("wmv", "video", ".wmv", _pattern(b"\x30\x26\xb2\x75\x8e\x66\xcf\x11"), description="ASF container"),
    # fonts
    _e("woff", "font", ".woff", _pattern(b"wOFF")),
    _e("woff2", "font", ".woff2", _pattern(b"wOF2")),
    _e("otf", "font", ".otf", _pattern(b"OTTO")),
    _e("ttc", "font", ".ttc", _pattern(b"ttcf")),
    _e("ttf", "font", ".ttf", _pattern(b"\x00\x01\x00\x00\x00")),
    # executables
    _e("elf", "executable", None, _pattern(b"\x7fELF")),
    _e("macho", "executable", None, _pattern(b"\xfe\xed\xfa\xce"), description="Mach-O 32-bit"),
    _e("macho", "executable", None, _pattern(b"\xfe\xed\xfa\xcf"), description="Mach-O 64-bit"),
    _e("macho", "executable", None, _pattern(b"\xce\xfa\xed\xfe"), description="Mach-O 32-bit"),
    _e("macho", "executable", None, _pattern(b"\xcf\xfa\xed\xfe"), description="Mach-O 64-bit"),
    _e("class", "executable", ".class", _pattern(b"\xca\xfe\xba\xbe"), description="Java class"),
    _e("wasm", "executable", ".wasm", _pattern(b"\x00asm")),
    _e("pe", "executable", ".exe", _pattern(b"MZ"), description="DOS/Windows executable"),
    # scripts
    _e("script", "script", None, _pattern(b"#!"), description="shebang script"),
)

MAX_SIGNATURE_LENGTH: int = max(entry.end for entry in SIGNATURE_TABLE)

BINARY_UNKNOWN = FileType("binary", "unknown")
TEXT_UNKNOWN = FileType("text", "unknown")
