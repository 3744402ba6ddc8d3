"""Extractive answer synthesis.

Answers are assembled from the ranked context verbatim. All wording comes
from the fixed templates below; nothing is chosen at random.
"""
from __future__ import annotations

import re
from typing import Callable, Sequence

from ..clean import split_sentences
from ..index.semantic import ScoredEntry
from .analyzer import QueryAnalysis, QueryType
from .entities import dedupe, find_contacts, find_dates, find_money
from .rank import entity_matches


NO_INFORMATION_MESSAGE = (
    "I couldn't find relevant information in the uploaded documents to answer your question. "
    "Please make sure you've uploaded documents that contain the information you're looking for."
)

SUMMARY_HEADER = "Based on the documents, here are the key points:"
LIST_HEADER = "Here's what I found:"
LIST_FALLBACK_HEADER = "I found relevant information but couldn't extract a specific list. Here's what I found:"
FACTUAL_PREFIX = "Based on the documents:"
FACTUAL_FALLBACK_HEADER = "Based on the available documents:"
COMPARISON_HEADER = "Based on the documents, here's relevant information for comparison:"
GENERAL_HEADER = "Based on your documents, here's the relevant information:"
SOURCES_PREFIX = "Sources:"

SUMMARY_SENTENCES = 5
MIN_SENTENCE_CHARS = 20
MAX_LIST_ITEMS = 10
MIN_SECTION_CHARS = 50
COMPARISON_SECTIONS = 3

_re_bullet = re.compile(r"^[ \t]*[*\-•][ \t]+(.+)$", re.MULTILINE)
_re_numbered = re.compile(r"^[ \t]*\d+[.)][ \t]+(.+)$", re.MULTILINE)

_ENTITY_EXTRACTORS: dict[str, Callable[[str], list[str]]] = {
    "financial": find_money,
    "temporal": find_dates,
    "contact": find_contacts,
}


def build_context(ranked: Sequence[ScoredEntry]) -> str:
    return "\n\n".join(h.entry.content for h in ranked)


def source_filenames(ranked: Sequence[ScoredEntry]) -> list[str]:
    return dedupe(h.entry.filename for h in ranked)


def excerpt(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def _sources_line(ranked: Sequence[ScoredEntry]) -> str:
    return f"{SOURCES_PREFIX} {', '.join(source_filenames(ranked))}"


def _candidate_sentences(context: str) -> list[str]:
    return dedupe(s.text for s in split_sentences(context) if len(s.text) > MIN_SENTENCE_CHARS)


def summary_answer(context: str, ranked: Sequence[ScoredEntry]) -> str:
    points = _candidate_sentences(context)[:SUMMARY_SENTENCES]
    if not points:
        return general_answer(context, ranked)
    body = "\n".join(f"{i}. {p}" for i, p in enumerate(points, start=1))
    return f"{SUMMARY_HEADER}\n\n{body}\n\n{_sources_line(ranked)}"


def list_items(context: str, intent: str) -> list[str]:
    extractor = _ENTITY_EXTRACTORS.get(intent)
    if extractor is not None:
        return dedupe(extractor(context))
    bullets = [m.group(1).strip() for m in _re_bullet.finditer(context)]
    numbered = [m.group(1).strip() for m in _re_numbered.finditer(context)]
    return dedupe(bullets + numbered)


def list_answer(context: str, analysis: QueryAnalysis) -> str:
    items = list_items(context, analysis.intent)[:MAX_LIST_ITEMS]
    if not items:
        return f"{LIST_FALLBACK_HEADER}\n\n{excerpt(context, 300)}"
    body = "\n".join(f"• {item}" for item in items)
    return f"{LIST_HEADER}\n\n{body}"


def factual_answer(context: str, analysis: QueryAnalysis) -> str:
    best = ""
    best_score = 0
    for sentence in _candidate_sentences(context):
        lowered = sentence.lower()
        score = sum(1 for kw in analysis.keywords if kw in lowered)
        score += 2 * entity_matches(sentence, analysis.entities)
        if score > best_score:
            best, best_score = sentence, score

    if best:
        return f"{FACTUAL_PREFIX} {best}"
    return f"{FACTUAL_FALLBACK_HEADER}\n\n{excerpt(context, 400)}"


def comparison_answer(context: str) -> str:
    sections = [s.strip() for s in context.split("\n\n") if s.strip()]
    sections = [s for s in sections if len(s) > MIN_SECTION_CHARS] or sections
    body = "\n\n".join(f"{i}. {s}" for i, s in enumerate(sections[:COMPARISON_SECTIONS], start=1))
    return f"{COMPARISON_HEADER}\n\n{body}"


def general_answer(context: str, ranked: Sequence[ScoredEntry]) -> str:
    return f"{GENERAL_HEADER}\n\n{excerpt(context, 500)}\n\n{_sources_line(ranked)}"


_LIST_TYPES = {
    QueryType.LIST,
    QueryType.TEMPORAL,
    QueryType.FINANCIAL,
    QueryType.CONTACT,
    QueryType.PROCEDURAL,
}


def synthesize(analysis: QueryAnalysis, ranked: Sequence[ScoredEntry]) -> str:
    if not ranked:
        return NO_INFORMATION_MESSAGE

    context = build_context(ranked)
    qtype = analysis.type
    if qtype == QueryType.SUMMARY:
        return summary_answer(context, ranked)
    if qtype in _LIST_TYPES:
        return list_answer(context, analysis)
    if qtype == QueryType.FACTUAL:
        return factual_answer(context, analysis)
    if qtype == QueryType.COMPARISON:
        return comparison_answer(context)
    return general_answer(context, ranked)
