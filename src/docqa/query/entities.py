from __future__ import annotations

import re
from typing import Iterable

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS


_MONTHS = (
    r"(?:jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)
# "may" and "march" double as common words, so bare month names need the full name
# and exclude "may".
_BARE_MONTHS = r"(?:january|february|march|april|june|july|august|september|october|november|december)"
_DAY = r"\d{1,2}(?:st|nd|rd|th)?"

DATE_RE = re.compile(
    r"\b(?:"
    r"\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2}"
    r"|\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}"
    rf"|{_MONTHS}\.?\s+{_DAY}(?:,?\s+\d{{4}})?"
    rf"|{_DAY}\s+{_MONTHS}\.?(?:,?\s+\d{{4}})?"
    rf"|{_BARE_MONTHS}(?:\s+\d{{4}})?"
    r")\b",
    re.IGNORECASE,
)

MONEY_RE = re.compile(
    r"[$€£]\s?\d[\d,]*(?:\.\d+)?"
    r"|\b\d[\d,]*(?:\.\d+)?\s*(?:dollars?|usd|euros?|eur|pounds?|gbp)\b",
    re.IGNORECASE,
)

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

PHONE_RE = re.compile(r"(?<![\w(])(?:\+?1[-.\s]?)?(?:\(\d{3}\)|\d{3})[-.\s]?\d{3}[-.\s]?\d{4}\b")

NAME_RE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")

# Capitalized words that start questions/sentences but are not names.
_NAME_STOPWORDS = frozenset(ENGLISH_STOP_WORDS) | {
    "how", "what", "when", "where", "why", "who", "which", "whose",
    "please", "list", "show", "tell", "give", "find", "summarize", "compare",
    "explain", "describe", "define",
}


def dedupe(items: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(i for i in items if i))


def find_names(text: str) -> list[str]:
    names: list[str] = []
    for m in NAME_RE.finditer(text):
        words = m.group(0).split()
        while words and words[0].lower() in _NAME_STOPWORDS:
            words.pop(0)
        if words:
            names.append(" ".join(words))
    return names


def find_dates(text: str) -> list[str]:
    return [m.group(0) for m in DATE_RE.finditer(text)]


def find_money(text: str) -> list[str]:
    return [m.group(0).strip() for m in MONEY_RE.finditer(text)]


def find_emails(text: str) -> list[str]:
    return EMAIL_RE.findall(text)


def find_phones(text: str) -> list[str]:
    return [m.group(0).strip() for m in PHONE_RE.finditer(text)]


def find_contacts(text: str) -> list[str]:
    return find_emails(text) + find_phones(text)


def extract_entities(text: str) -> list[str]:
    """All entity kinds, in scan order, exact duplicates removed."""
    return dedupe(
        find_names(text)
        + find_dates(text)
        + find_money(text)
        + find_emails(text)
        + find_phones(text)
    )
