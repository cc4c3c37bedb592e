"""
nl_model/constants.py — stałe leksykalne translatora i renderera.
"""

from __future__ import annotations

DEFAULT_VAR = "?x"

# Słowa kluczowe DSL: nie mogą być nazwami operatorów (dostają sufiks _op)
DSL_KEYWORDS: frozenset[str] = frozenset({
    "theory", "import", "rule", "macro", "begin", "end", "return", "solve",
})

# Maksymalna liczba referencji w jednym And/Or; dłuższe listy są zagnieżdżane
MAX_POSITIONS = 20

RELATION_MARKER = "__Relation"

PRONOUNS: frozenset[str] = frozenset({
    "someone", "something", "they", "it", "he", "she",
})

GENERIC_CLASS_NOUNS: frozenset[str] = frozenset({
    "thing", "things", "someone", "something",
})

DETERMINERS: frozenset[str] = frozenset({
    "the", "a", "an", "their", "his", "her", "its", "my", "your", "our",
    "some", "any", "no", "every", "each",
})

PARTICLES: frozenset[str] = frozenset({
    "up", "down", "in", "out", "on", "off", "over", "away", "back",
})

COPULA_VERBS: frozenset[str] = frozenset({"is", "are", "was", "were"})

HAVE_VERBS: frozenset[str] = frozenset({"has", "have", "had"})

# Zmienne pojedynczych liter (X, Y, ...) oraz porządkowe ("the first person")
LETTER_VARIABLES: dict[str, str] = {
    "x": "?x", "y": "?y", "z": "?z", "w": "?w", "v": "?v",
}
ORDINAL_VARIABLES: dict[str, str] = {
    "first": "?x", "second": "?y", "third": "?z", "fourth": "?w", "fifth": "?v",
}

# Przyimki lokatywne → operator
LOCATIVE_OPERATORS: dict[str, str] = {
    "in":      "at",
    "at":      "at",
    "inside":  "at",
    "on":      "on",
    "under":   "under",
    "over":    "over",
    "outside": "outside",
    "near":    "near",
    "behind":  "behind",
    "beside":  "beside",
}

# Symbole zarezerwowane: nie są poprawnymi odpowiedziami zapytań
RESERVED_SYMBOLS: frozenset[str] = frozenset({
    "ForAll", "And", "Or", "Not", "Implies", "Exists",
    "isA", "has", "can", "must", "causes", "implies",
    "seatedAt", "conflictsWith", "locatedIn",
})
