from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


DF_MODES = ("substring", "token")


@dataclass(frozen=True)
class EngineConfig:
    name: str = "default"

    # chunking
    chunk_size: int = 500
    overlap_sentences: int = 2

    # index
    similarity_threshold: float = 0.1
    df_mode: str = "substring"

    # retrieval / ranking
    search_top_k: int = 8
    max_ranked: int = 6
    min_chunk_chars: int = 50
    entity_boost: float = 0.1

    # presentation
    excerpt_chars: int = 200
    max_sources: int = 5

    # document metadata
    keyword_limit: int = 20

    def __post_init__(self) -> None:
        if self.df_mode not in DF_MODES:
            raise ValueError(f"Unknown df_mode: {self.df_mode!r} (expected one of {DF_MODES})")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.overlap_sentences < 0:
            raise ValueError(f"overlap_sentences must be >= 0, got {self.overlap_sentences}")


def config_from_cfg(cfg: dict | None) -> EngineConfig:
    # allow empty cfg
    cfg = cfg or {}
    return EngineConfig(
        name=str(cfg.get("name", "default")),
        chunk_size=int(cfg.get("chunk_size", 500)),
        overlap_sentences=int(cfg.get("overlap_sentences", 2)),
        similarity_threshold=float(cfg.get("similarity_threshold", 0.1)),
        df_mode=str(cfg.get("df_mode", "substring")).lower(),
        search_top_k=int(cfg.get("search_top_k", 8)),
        max_ranked=int(cfg.get("max_ranked", 6)),
        min_chunk_chars=int(cfg.get("min_chunk_chars", 50)),
        entity_boost=float(cfg.get("entity_boost", 0.1)),
        excerpt_chars=int(cfg.get("excerpt_chars", 200)),
        max_sources=int(cfg.get("max_sources", 5)),
        keyword_limit=int(cfg.get("keyword_limit", 20)),
    )


def load_config(path: Path | str) -> EngineConfig:
    cfg = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    return config_from_cfg(cfg)
