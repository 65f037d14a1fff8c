"""Detection and heuristic repair of letter-spaced ("garbled") model output.

The corruption we see looks like text extracted from a PDF: words split into
syllables (``L'é non cé``), JSON keys split around underscores, single letters
separated by spaces. Detection combines several independent signals; the
repair rules are lossy and only make sense once a signal has fired.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, fields
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Sequence

logger = logging.getLogger("voxplan.pipeline")

_DEFAULT_DICTIONARY = Path(__file__).resolve().parents[2] / "resources" / "spacing_fixes.json"

_LETTERS = "a-zàâäéèêëïîôùûüÿçœæ"
_SHORT = f"[{_LETTERS}]{{2,4}}"
_ISOLATED_ACCENT = "âäéèêëïîôùûüÿç"

# Closed set of legitimate short words; a run of short tokens containing one
# of these is treated as normal prose. Syllables that also start or end
# broken words (con, tion, pré, né...) must stay out of it.
FUNCTION_WORDS: frozenset[str] = frozenset(
    """
    a à ai as au aux avec bien car ce ces cet ça chez ci cas dans de des deux
    dit doit dont du elle en est et eux fait faut fin il ils je la là le les
    leur lors lui ma mais me mes moi mon ne ni non nos nous on ont or ou où
    par pas peu peut plus pour puis qu que quel qui quoi sa se ses si son
    sont sous sur ta te tes toi ton tous tout très tu un une va vers voir vos
    vous y été même afin ici soit sera
    cela ceci ceux leurs elles quels dès près loin hors via
    donc sans alors aussi ainsi trop tôt tard déjà mal mieux moins tant oui
    hier jadis tel tels nul voilà voici
    être avoir dire faire veut vont font fut suis es sais sait aura ait eu
    vu pu su mis pris lu agir agit vit met mène rend tend vaut peux dois
    vais fais ira irait fût crée joue lie suit voit
    fois but rôle sens vie loi lois pays mot mots idée lieu part plan axe
    axes type jour ans rien soi chacun
    the of and to in is it on at for by an as or be are was
    """.split()
)

_JSON_KEYS = r"(task|detailed|conclusion|introduction|draft)"

_SPACED_JSON_KEY = re.compile(rf"\b{_JSON_KEYS}\s+_")
_LETTER_SPACING = re.compile(r"(?<!\w)(?:[^\W\d_]\s){3,}[^\W\d_](?!\w)")
_SPACED_ACCENT = re.compile(
    rf"(?<!\w)([{_ISOLATED_ACCENT}])\s+([{_LETTERS}]{{1,3}})\b",
    re.IGNORECASE,
)
_SPACED_HYPHEN = re.compile(r"\w\s+-\s+\w")
_SHORT_TRIPLE = re.compile(
    rf"\b(?=({_SHORT})\s+({_SHORT})\s+({_SHORT})\b)",
    re.IGNORECASE,
)
_SHORT_RUN = re.compile(rf"\b{_SHORT}(?:\s+{_SHORT})+\b", re.IGNORECASE)


@dataclass(frozen=True)
class SpacingRule:
    pattern: re.Pattern[str]
    replacement: str


class SpacingDictionary:
    """Replaceable lookup of known broken words and their repaired form."""

    def __init__(self, rules: Sequence[SpacingRule]) -> None:
        self._rules = tuple(rules)

    def __len__(self) -> int:
        return len(self._rules)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[str]]) -> "SpacingDictionary":
        rules = []
        for pattern, replacement in pairs:
            try:
                rules.append(SpacingRule(re.compile(pattern), replacement))
            except re.error as exc:
                logger.warning("Skipping invalid spacing rule %r: %s", pattern, exc)
        return cls(rules)

    @classmethod
    def from_file(cls, path: str | Path) -> "SpacingDictionary":
        """Load rules from a JSON file: ``{"rules": [[pattern, replacement], ...]}``."""

        resource_path = Path(path)
        if not resource_path.exists():
            logger.warning("Spacing dictionary %s not found, using no rules", resource_path)
            return cls(())
        with resource_path.open("r", encoding="utf-8") as resource_file:
            data = json.load(resource_file)
        pairs = data.get("rules", []) if isinstance(data, dict) else data
        return cls.from_pairs(pairs)

    def matches(self, text: str) -> bool:
        return any(rule.pattern.search(text) for rule in self._rules)

    def apply(self, text: str) -> str:
        for rule in self._rules:
            text = rule.pattern.sub(rule.replacement, text)
        return text


@lru_cache(maxsize=8)
def load_dictionary(path: str | None = None) -> SpacingDictionary:
    """Bundled dictionary, or the one at ``path`` when configured."""

    return SpacingDictionary.from_file(path or _DEFAULT_DICTIONARY)


@dataclass(frozen=True)
class GarblingSignals:
    """Independent hints that text went through a broken extraction."""

    letter_spacing: bool = False
    spaced_json_keys: bool = False
    known_broken_words: bool = False
    spaced_accents: bool = False
    spaced_hyphens: bool = False
    short_syllable_run: bool = False

    @property
    def count(self) -> int:
        return sum(1 for f in fields(self) if getattr(self, f.name))

    def __bool__(self) -> bool:
        return self.count > 0

    def raised(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name)]


def _is_function_word(token: str) -> bool:
    return token.lower() in FUNCTION_WORDS


def _has_short_syllable_run(text: str) -> bool:
    for match in _SHORT_TRIPLE.finditer(text):
        if not any(_is_function_word(token) for token in match.groups()):
            return True
    return False


def _has_isolated_accent(text: str) -> bool:
    return _SPACED_ACCENT.search(text) is not None


def garbling_signals(
    text: str | None,
    dictionary: SpacingDictionary | None = None,
) -> GarblingSignals:
    s = text or ""
    if not s.strip():
        return GarblingSignals()
    lookup = dictionary or load_dictionary()
    return GarblingSignals(
        letter_spacing=_LETTER_SPACING.search(s) is not None,
        spaced_json_keys=_SPACED_JSON_KEY.search(s) is not None,
        known_broken_words=lookup.matches(s),
        spaced_accents=_has_isolated_accent(s),
        spaced_hyphens=_SPACED_HYPHEN.search(s) is not None,
        short_syllable_run=_has_short_syllable_run(s),
    )


def detect_garbling(
    text: str | None,
    dictionary: SpacingDictionary | None = None,
) -> bool:
    """True when ``text`` shows at least one hallmark of broken extraction."""

    return bool(garbling_signals(text, dictionary))


def _merge_short_run(match: re.Match[str]) -> str:
    tokens = match.group(0).split()
    merged: list[str] = []
    i = 0
    while i < len(tokens):
        window = tokens[i : i + 3]
        if len(window) == 3 and not any(_is_function_word(t) for t in window):
            merged.append("".join(window))
            i += 3
        else:
            merged.append(tokens[i])
            i += 1
    return " ".join(merged)


def _join_letters(match: re.Match[str]) -> str:
    return re.sub(r"\s", "", match.group(0))


def repair_spacing_heuristically(
    text: str | None,
    dictionary: SpacingDictionary | None = None,
) -> str:
    """Apply the narrow rewrite rules, most specific first.

    Returns the input untouched when no garbling signal is present.
    """

    s = text or ""
    lookup = dictionary or load_dictionary()
    signals = garbling_signals(s, lookup)
    if not signals:
        return s

    s = re.sub(rf"\b{_JSON_KEYS}\s+_\s*(\w+)", r"\1_\2", s)
    s = re.sub(r"(\d{1,4})\s+(\d{1,4})", r"\1\2", s)
    s = re.sub(r"\s+(['’])", r"\1", s)
    s = re.sub(r"(['’])\s+", r"\1", s)
    s = re.sub(r"\s*-\s*t\s*-\s*", "-t-", s)
    s = re.sub(r"(\w)\s+-\s+(\w)", r"\1-\2", s)
    s = _LETTER_SPACING.sub(_join_letters, s)
    s = lookup.apply(s)
    s = _SPACED_ACCENT.sub(r"\1\2", s)
    s = _SHORT_RUN.sub(_merge_short_run, s)

    logger.info("Spacing repair applied signals=%s", ",".join(signals.raised()))
    return s


__all__ = [
    "FUNCTION_WORDS",
    "GarblingSignals",
    "SpacingDictionary",
    "detect_garbling",
    "garbling_signals",
    "load_dictionary",
    "repair_spacing_heuristically",
]
