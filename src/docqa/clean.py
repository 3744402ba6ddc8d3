from __future__ import annotations

import re
from dataclasses import dataclass


_re_hyphen_linebreak = re.compile(r"(\w)-\n(\w)")
_re_multispace = re.compile(r"[ \t\x0b\r\f]+")
_re_multi_newlines = re.compile(r"\n{3,}")
_re_sentence_end = re.compile(r"(?<=[.!?])\s+")


@dataclass(frozen=True)
class Sentence:
    text: str
    start: int
    end: int


def normalize_text(text: str) -> str:
    """Light, deterministic cleanup for already-decoded document text."""

    # Fix word breaks: "reim-\nbursement" -> "reimbursement"
    text = _re_hyphen_linebreak.sub(r"\1\2", text)
    # Normalize newlines
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    # Collapse repeated spaces
    text = _re_multispace.sub(" ", text)
    # Collapse excessive blank lines
    text = _re_multi_newlines.sub("\n\n", text)
    # Trim trailing whitespace on each line
    text = "\n".join(line.rstrip() for line in text.splitlines())
    return text.strip()


def split_sentences(text: str) -> list[Sentence]:
    """Split text into sentence-like units, keeping character offsets.

    Every non-empty line is split on terminal punctuation; a line without
    punctuation (a bullet, a heading) is kept as a single unit.
    """
    units: list[Sentence] = []
    if not text:
        return units

    pos = 0
    for raw_line in text.splitlines(keepends=True):
        line_start = pos
        pos += len(raw_line)
        line = raw_line.rstrip("\r\n")
        if not line.strip():
            continue

        cursor = 0
        for m in _re_sentence_end.finditer(line):
            _append_unit(units, line, cursor, m.start(), line_start)
            cursor = m.end()
        _append_unit(units, line, cursor, len(line), line_start)

    return units


def _append_unit(units: list[Sentence], line: str, start: int, end: int, offset: int) -> None:
    piece = line[start:end]
    stripped = piece.strip()
    if not stripped:
        return
    lead = len(piece) - len(piece.lstrip())
    s = offset + start + lead
    units.append(Sentence(text=stripped, start=s, end=s + len(stripped)))


def count_words(text: str) -> int:
    return len(text.split())
