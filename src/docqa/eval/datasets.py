from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path


@dataclass
class SourceDocument:
    filename: str
    text: str
    owner_id: str = "eval"


@dataclass
class RetrievalQuestion:
    id: str
    question: str
    expected_filenames: list[str]


def iter_jsonl(path: Path):
    """Yield one object per non-empty line; lines starting with '#' are comments."""
    with path.open("r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                yield json.loads(line)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path}:{lineno}: invalid JSON ({e.msg})") from e


def load_documents(path: Path) -> list[SourceDocument]:
    return [
        SourceDocument(
            filename=str(item["filename"]),
            text=str(item["text"]),
            owner_id=str(item.get("owner_id") or "eval"),
        )
        for item in iter_jsonl(path)
    ]


def load_retrieval_questions(path: Path) -> list[RetrievalQuestion]:
    return [
        RetrievalQuestion(
            id=str(item["id"]),
            question=str(item["question"]),
            expected_filenames=[str(f) for f in item.get("expected_filenames") or []],
        )
        for item in iter_jsonl(path)
    ]
