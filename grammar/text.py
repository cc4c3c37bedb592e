"""
grammar/text.py — narzędzia tekstowe translatora.

Czyste funkcje (bez I/O): normalizacja białych znaków, podział na zdania,
podział koordynacji (and / or / neither...nor), wykrywanie negacji,
liczba mnoga / pojedyncza (heurystyka sufiksowa), sanityzacja
identyfikatorów encji, typów i predykatów.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass, field

from nl_model.constants import (
    DEFAULT_VAR,
    DSL_KEYWORDS,
    GENERIC_CLASS_NOUNS,
    LETTER_VARIABLES,
    ORDINAL_VARIABLES,
    PRONOUNS,
)
from nl_model.types import Connective

# ---------------------------------------------------------------------------
# Białe znaki
# ---------------------------------------------------------------------------

_WS_RE       = re.compile(r"\s+")
_TRAIL_RE    = re.compile(r"[\s.?!]+$")
_VARIABLE_RE = re.compile(r"^\?[A-Za-z_][A-Za-z0-9_]*$")


def clean(text: str) -> str:
    """Zwija białe znaki, przycina, usuwa końcową interpunkcję (idempotentne)."""
    t = _WS_RE.sub(" ", text or "").strip()
    return _TRAIL_RE.sub("", t)


def lower(text: str) -> str:
    return clean(text).lower()


def stable_hash(text: str, length: int = 10) -> str:
    """Deterministyczny skrót sha1 znormalizowanego tekstu."""
    return hashlib.sha1(clean(text).lower().encode("utf-8")).hexdigest()[:length]


# ---------------------------------------------------------------------------
# Zdania
# ---------------------------------------------------------------------------

_ABBREVIATIONS = ("No", "Mr", "Mrs", "Ms", "Dr", "Prof", "Sr", "Jr", "St")
_ABBREV_RE     = re.compile(r"\b(" + "|".join(_ABBREVIATIONS) + r")\.(?=\s)")
_DECIMAL_RE    = re.compile(r"(\d)\.(\d)")
_INITIALISM_RE = re.compile(r"\b(?:[A-Z]\.){2,}")
_SENT_SPLIT_RE = re.compile(r"(?<=[.?!])\s+")
_DOT = "\u0000"


def split_sentences(text: str) -> list[str]:
    """
    Dzieli tekst na zdania.

    Nowe linie i średniki kończą zdanie; kropki w skrótach (Mr., Dr.),
    liczbach dziesiętnych i inicjałach (U.S.A.) nie dzielą.
    """
    t = re.sub(r"[\r\n]+", ". ", text or "")
    t = re.sub(r";\s+", ". ", t)
    t = _WS_RE.sub(" ", t).strip()
    t = _ABBREV_RE.sub(lambda m: m.group(1) + _DOT, t)
    t = _DECIMAL_RE.sub(lambda m: m.group(1) + _DOT + m.group(2), t)
    t = _INITIALISM_RE.sub(lambda m: m.group(0).replace(".", _DOT), t)

    out = []
    for part in _SENT_SPLIT_RE.split(t):
        s = clean(part.replace(_DOT, "."))
        s = re.sub(r"^[.\s]+", "", s)
        if s:
            out.append(s)
    return out


# ---------------------------------------------------------------------------
# Koordynacja
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class Coordination:
    """
    Wynik podziału koordynacji.

    - op:      spójnik (pierwszy napotkany wygrywa)
    - items:   człony w kolejności
    - negated: True dla "neither A nor B" (każdy człon zanegowany)
    - mixed:   True gdy w tekście wystąpiły oba spójniki (and + or)
    """
    op: Connective
    items: list[str] = field(default_factory=list)
    negated: bool = False
    mixed: bool = False


_NEITHER_RE = re.compile(r"^neither\s+(.+?)\s+nor\s+(.+)$", re.IGNORECASE)
_JOINER_RE  = re.compile(r"\s+(and|or)\s+|\s*,\s*", re.IGNORECASE)
_BETWEEN_RE = re.compile(r"\bbetween\b", re.IGNORECASE)


def split_coord(text: str) -> Coordination:
    """
    Dzieli tekst na człony na najwyższym poziomie (poza nawiasami).

    Obsługuje ", and", ", or", "as well as", przecinki oraz neither/nor.
    Po "between A" pierwsze "and" nie dzieli ("between A and B").
    """
    t = clean(text)
    m = _NEITHER_RE.match(t)
    if m:
        return Coordination(Connective.AND, [clean(m.group(1)), clean(m.group(2))], negated=True)

    t = re.sub(r",\s*(and|or)\s+", r" \1 ", t, flags=re.IGNORECASE)
    t = re.sub(r"\s+as\s+well\s+as\s+", " and ", t, flags=re.IGNORECASE)

    depth_at = []
    depth = 0
    for ch in t:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        depth_at.append(depth)

    items: list[str] = []
    seen: list[str] = []
    start = 0
    between_open = False
    for jm in _JOINER_RE.finditer(t):
        if depth_at[jm.start()] > 0:
            continue
        segment = t[start:jm.start()]
        joiner = (jm.group(1) or ",").lower()
        if _BETWEEN_RE.search(segment) and not between_open and joiner == "and":
            between_open = True
            continue
        between_open = False
        items.append(segment)
        if joiner != "," and joiner not in seen:
            seen.append(joiner)
        start = jm.end()
    items.append(t[start:])

    op = Connective.OR if seen and seen[0] == "or" else Connective.AND
    return Coordination(
        op,
        [s for s in (clean(i) for i in items) if s],
        mixed=len(seen) > 1,
    )


# ---------------------------------------------------------------------------
# Negacja
# ---------------------------------------------------------------------------

_NEG_PREFIX_RE = re.compile(
    r"^(?:does\s+not|do\s+not|did\s+not|doesn't|don't|didn't|not)\s+(.*)$",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class Negation:
    negated: bool
    rest: str


def detect_negation_prefix(text: str) -> Negation:
    t = clean(text)
    m = _NEG_PREFIX_RE.match(t)
    if m:
        return Negation(True, clean(m.group(1)))
    return Negation(False, t)


# ---------------------------------------------------------------------------
# Liczba mnoga / pojedyncza
# ---------------------------------------------------------------------------

_IRREGULAR_PLURALS: frozenset[str] = frozenset({
    "fungi", "cacti", "bacteria", "criteria", "phenomena", "data", "people",
    "mice", "children", "men", "women", "feet", "teeth", "things",
    "sheep", "deer", "fish",
})

_IRREGULAR_SINGULAR: dict[str, str] = {
    "wolves":       "wolf",
    "fungi":        "fungus",
    "cacti":        "cactus",
    "bacteria":     "bacterium",
    "criteria":     "criterion",
    "phenomena":    "phenomenon",
    "data":         "datum",
    "people":       "person",
    "mice":         "mouse",
    "children":     "child",
    "men":          "man",
    "women":        "woman",
    "livingthings": "livingthing",
}


def is_plural(word: str) -> bool:
    w = (word or "").lower()
    if w in _IRREGULAR_PLURALS:
        return True
    if w.endswith("uses"):
        return len(w) > 4
    if w.endswith("ies") or w.endswith("es"):
        return len(w) > 3
    return w.endswith("s") and not w.endswith(("ss", "us")) and len(w) > 2


def singularize(word: str) -> str:
    w = (word or "").lower()
    if w in _IRREGULAR_SINGULAR:
        return _IRREGULAR_SINGULAR[w]
    if w.endswith("us"):
        return w
    if w.endswith("uses") and len(w) > 4:
        return w[:-1] if w[-5] in "aeiou" else w[:-2]
    if w.endswith("ies") and len(w) > 3:
        return w[:-3] + "y"
    if w.endswith(("sses", "xes", "ches", "shes", "zes", "oes")) and len(w) > 3:
        return w[:-2]
    if w.endswith("es") and len(w) > 3:
        return w[:-1]
    if w.endswith("s") and not w.endswith("ss"):
        return w[:-1]
    return w


def pluralize(word: str) -> str:
    w = (word or "").lower()
    if not w:
        return w
    if re.search(r"[^aeiou]y$", w):
        return w[:-1] + "ies"
    if w.endswith(("s", "x", "z", "ch", "sh")):
        return w + "es"
    return w + "s"


def is_generic_class_noun(word: str) -> bool:
    w = (word or "").lower()
    return w in GENERIC_CLASS_NOUNS or singularize(w) in GENERIC_CLASS_NOUNS


def is_type_noun(word: str) -> bool:
    return is_plural(word) and not is_generic_class_noun(word)


# ---------------------------------------------------------------------------
# Identyfikatory
# ---------------------------------------------------------------------------

_NON_WORD_RE = re.compile(r"[^A-Za-z0-9_]")
_ARTICLE_RE  = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)
_ORDINAL_RE  = re.compile(
    r"^(?:the\s+)?(first|second|third|fourth|fifth)\s+(?:person|thing|place)$"
)

_VERB_NORMALIZATION: dict[str, str] = {
    "like": "likes",
    "love": "loves",
    "hate": "hates",
    "need": "requires",
}


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower() if word else word


def is_variable(arg: str) -> bool:
    return bool(_VARIABLE_RE.match(arg or ""))


def sanitize_predicate(text: str) -> str:
    """Nazwa operatora/własności: [A-Za-z0-9_], nie zaczyna się cyfrą, nie słowo kluczowe."""
    name = _NON_WORD_RE.sub("", (text or "").replace("-", "").replace(" ", "_"))
    name = re.sub(r"_+", "_", name).strip("_")
    if not name:
        return ""
    if name[0].isdigit():
        name = "p" + name
    if name.lower() in DSL_KEYWORDS:
        name = name + "_op"
    return name


def normalize_verb(verb: str) -> str:
    v = (verb or "").lower()
    return _VERB_NORMALIZATION.get(v, v)


def normalize_type_name(text: str) -> str:
    word = _NON_WORD_RE.sub("", text or "")
    if not word:
        return ""
    name = capitalize(singularize(word))
    return "T" + name if name[0].isdigit() else name


def normalize_entity(text: str, default_var: str = DEFAULT_VAR) -> str:
    """
    Nazwa encji: zaimki i "the first person" → zmienne, pojedyncze litery
    X/Y/Z/W/V → ?x..?v, pozostałe słowa → CamelCase bez rodzajnika.
    """
    raw = clean(text)
    if is_variable(raw):
        return raw
    t = raw.lower()
    if t in PRONOUNS:
        return default_var
    m = _ORDINAL_RE.match(t)
    if m:
        return ORDINAL_VARIABLES[m.group(1)]
    if t in LETTER_VARIABLES:
        return LETTER_VARIABLES[t]

    t = _ARTICLE_RE.sub("", t)
    words = [_NON_WORD_RE.sub("", w) for w in t.split(" ")]
    name = "".join(capitalize(w) for w in words if w)
    if not name:
        return default_var
    return "E" + name if name[0].isdigit() else name
