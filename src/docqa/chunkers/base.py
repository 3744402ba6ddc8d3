from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


def chunk_id_for(doc_id: str, ordinal: int) -> str:
    return f"{doc_id}_chunk_{ordinal}"


@dataclass(frozen=True)
class Chunk:
    chunk_id: str
    doc_id: str
    ordinal: int
    text: str
    word_count: int
    start: int
    end: int


class Chunker(Protocol):
    def chunk(self, doc_id: str, text: str) -> list[Chunk]: ...
