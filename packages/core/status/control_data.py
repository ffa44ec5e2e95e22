"""
Application control property codec.

The control block starts with a table of 16 language entries, 0x300 bytes
each: a 0x200-byte NUL-terminated UTF-8 title name followed by a 0x100-byte
publisher name. Only the table is interpreted; the rest of the block (and the
icon that follows it in storage) is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

NAME_SIZE = 0x200
PUBLISHER_SIZE = 0x100
ENTRY_SIZE = NAME_SIZE + PUBLISHER_SIZE
LANGUAGE_COUNT = 16
TABLE_SIZE = ENTRY_SIZE * LANGUAGE_COUNT

# Slot order of the name table
LANGUAGES: Tuple[str, ...] = (
    "AmericanEnglish",
    "BritishEnglish",
    "Japanese",
    "French",
    "German",
    "LatinAmericanSpanish",
    "Spanish",
    "Italian",
    "Dutch",
    "CanadianFrench",
    "Portuguese",
    "Russian",
    "Korean",
    "TraditionalChinese",
    "SimplifiedChinese",
    "BrazilianPortuguese",
)


class ControlDataError(ValueError):
    """Blob is too short to hold the language table."""


@dataclass(frozen=True)
class LanguageEntry:
    language: str
    name: str
    publisher: str


@dataclass(frozen=True)
class ControlData:
    entries: Tuple[LanguageEntry, ...]

    def first_name(self, max_length: int) -> Optional[str]:
        """First non-empty name in slot order, cut to ``max_length`` chars."""
        for entry in self.entries:
            if entry.name:
                return entry.name[:max_length]
        return None


def _read_cstr(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def parse_control_data(blob: bytes) -> ControlData:
    if len(blob) < TABLE_SIZE:
        raise ControlDataError(f"control data is {len(blob)} bytes, need at least {TABLE_SIZE:#x}")

    entries: List[LanguageEntry] = []
    for slot, language in enumerate(LANGUAGES):
        base = slot * ENTRY_SIZE
        entries.append(LanguageEntry(
            language=language,
            name=_read_cstr(blob[base:base + NAME_SIZE]),
            publisher=_read_cstr(blob[base + NAME_SIZE:base + ENTRY_SIZE]),
        ))
    return ControlData(entries=tuple(entries))


def _write_cstr(text: str, size: int) -> bytes:
    # Leave room for the terminator; never split a multi-byte character.
    raw = text.encode("utf-8")[:size - 1].decode("utf-8", errors="ignore").encode("utf-8")
    return raw.ljust(size, b"\0")


def build_control_data(names: Sequence[str], publishers: Sequence[str] = ()) -> bytes:
    """Encode a language table; slots beyond ``names`` are left empty."""
    if len(names) > LANGUAGE_COUNT or len(publishers) > LANGUAGE_COUNT:
        raise ValueError(f"at most {LANGUAGE_COUNT} language slots")

    out = bytearray()
    for slot in range(LANGUAGE_COUNT):
        name = names[slot] if slot < len(names) else ""
        publisher = publishers[slot] if slot < len(publishers) else ""
        out += _write_cstr(name, NAME_SIZE)
        out += _write_cstr(publisher, PUBLISHER_SIZE)
    return bytes(out)
