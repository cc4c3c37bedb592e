"""
grammar/existentials.py — zdania egzystencjalne.

parse_existential_copula("There is an animal")    -> ExistentialClaim("Animal", negated=False)
parse_existential_copula("There are no unicorns") -> ExistentialClaim("Unicorn", negated=True)
extract_existential_type_claims("... certain animals, including humans") -> ["Animal", "Human"]
existential_entity(salt) -> "exists_ent_<sha1[:10]>"
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .shared import parse_type_phrase
from .text import clean, is_type_noun, normalize_type_name, stable_hash

_EXISTENTIAL_RE = re.compile(
    r"^there\s+(?:is|are|exists?|was|were)\s+(not\s+|no\s+)?(?:(?:a|an|some)\s+)?(.+)$",
    re.IGNORECASE,
)
_CLAIM_RE = re.compile(r"\b(?:certain|including)\s+([a-z][a-z-]*)", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ExistentialClaim:
    type_name: str
    negated: bool = False


def existential_entity(salt: str) -> str:
    return f"exists_ent_{stable_hash(salt)}"


def parse_existential_copula(text: str) -> ExistentialClaim | None:
    t = clean(text)
    m = _EXISTENTIAL_RE.match(t)
    if not m or re.search(r"\bbetween\b", m.group(2), re.IGNORECASE):
        return None
    type_name = parse_type_phrase(m.group(2))
    if not type_name:
        return None
    return ExistentialClaim(type_name, negated=bool(m.group(1)))


def extract_existential_type_claims(sentence: str) -> list[str]:
    """Typy wprowadzone frazami "certain <plural>" / "including <plural>"."""
    out: list[str] = []
    for m in _CLAIM_RE.finditer(sentence or ""):
        word = m.group(1).strip("-")
        if not is_type_noun(word):
            continue
        name = normalize_type_name(word)
        if name and name not in out:
            out.append(name)
    return out
