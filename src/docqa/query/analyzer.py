from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from .entities import dedupe, extract_entities


class QueryType(str, Enum):
    FACTUAL = "factual"
    SUMMARY = "summary"
    LIST = "list"
    COMPARISON = "comparison"
    TEMPORAL = "temporal"
    FINANCIAL = "financial"
    CONTACT = "contact"
    PROCEDURAL = "procedural"
    GENERAL = "general"
    UNKNOWN = "unknown"


# Order matters: the first matching rule wins.
_TYPE_RULES: list[tuple[QueryType, re.Pattern[str]]] = [
    (QueryType.SUMMARY, re.compile(r"\b(summari[sz]e|summary|overview|main points|key points|tl;?dr)\b")),
    (QueryType.LIST, re.compile(r"\b(list|enumerate|find all|show all|what\b.*\bare)\b")),
    (QueryType.COMPARISON, re.compile(r"\b(compare|comparison|difference|differences|versus|vs|better|worse)\b")),
    (QueryType.TEMPORAL, re.compile(r"\b(when|dates?|time|deadlines?|schedule|timeline)\b")),
    (QueryType.FINANCIAL, re.compile(r"\b(cost|costs|price|prices|amount|money|budget|financial|pay|paid|payment|fees?|how much)\b")),
    (QueryType.CONTACT, re.compile(r"\b(contact|email|phone|address|who)\b")),
    (QueryType.PROCEDURAL, re.compile(r"\b(how to|how do|how can|steps?|procedure|process)\b")),
    (QueryType.FACTUAL, re.compile(r"\b(what|how|why|where|which|define|explain|describe)\b")),
]

_INTENT_RULES: list[tuple[str, re.Pattern[str]]] = [
    ("financial", re.compile(r"\b(cost|price|amount|money|budget|pay|paid|payment|fees?)\b")),
    ("temporal", re.compile(r"\b(dates?|when|deadlines?|schedule|time)\b")),
    ("contact", re.compile(r"\b(contact|email|phone|address|person|people)\b")),
    ("requirements", re.compile(r"\b(requirements?|must|should|need|action|task|todo)\b")),
    ("coverage", re.compile(r"\b(coverage|cover|include|benefits?|eligible)\b")),
    ("procedural", re.compile(r"\b(process|procedure|how to|steps)\b")),
]

_FOCUS_AREAS: list[tuple[str, tuple[str, ...]]] = [
    ("insurance", ("policy", "insurance", "coverage")),
    ("medical", ("medical", "health", "doctor", "treatment")),
    ("financial", ("financial", "cost", "price", "payment")),
    ("legal", ("legal", "law", "regulation", "compliance")),
    ("technical", ("technical", "system", "software", "technology")),
    ("contractual", ("contract", "agreement", "terms")),
]

QUERY_STOPWORDS = frozenset(ENGLISH_STOP_WORDS) | {
    "what", "how", "when", "where", "why", "who", "is", "are", "the",
    "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
}

_ENTITY_INTENTS = {QueryType.TEMPORAL, QueryType.FINANCIAL, QueryType.CONTACT}

_re_word = re.compile(r"\w+")


@dataclass
class QueryAnalysis:
    query: str
    type: QueryType
    intent: str
    entities: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    focus: list[str] = field(default_factory=list)


def classify(query: str) -> QueryType:
    lowered = query.lower()
    if not _re_word.search(lowered):
        return QueryType.UNKNOWN
    for qtype, pattern in _TYPE_RULES:
        if pattern.search(lowered):
            return qtype
    return QueryType.GENERAL


def determine_intent(query: str) -> str:
    lowered = query.lower()
    for intent, pattern in _INTENT_RULES:
        if pattern.search(lowered):
            return intent
    return "general"


def determine_focus(query: str) -> list[str]:
    lowered = query.lower()
    return [area for area, words in _FOCUS_AREAS if any(w in lowered for w in words)]


def extract_keywords(query: str) -> list[str]:
    return dedupe(
        tok.lower()
        for tok in _re_word.findall(query)
        if len(tok) > 3 and tok.lower() not in QUERY_STOPWORDS
    )


def analyze_query(query: str) -> QueryAnalysis:
    query = query or ""
    qtype = classify(query)
    intent = qtype.value if qtype in _ENTITY_INTENTS else determine_intent(query)
    return QueryAnalysis(
        query=query,
        type=qtype,
        intent=intent,
        entities=extract_entities(query),
        keywords=extract_keywords(query),
        focus=determine_focus(query),
    )
