"""Extractive question answering over small private document collections.

TF-IDF vectors over an append-only vocabulary, an in-memory semantic index
per owner, rule-based query analysis and extractive answer synthesis. The
index, chunker and synthesizer are plain classes/functions so any of them can
be swapped without touching the rest.
"""
from __future__ import annotations

from .config import EngineConfig, config_from_cfg, load_config
from .documents import Document, build_document
from .engine import AnswerGenerator, ContextBundle, EngineStats, QueryEngine, QueryResult, Source

__all__ = [
    "AnswerGenerator",
    "ContextBundle",
    "Document",
    "EngineConfig",
    "EngineStats",
    "QueryEngine",
    "QueryResult",
    "Source",
    "build_document",
    "config_from_cfg",
    "load_config",
]
