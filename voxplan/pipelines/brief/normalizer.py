"""Pure text clean-up used at the different stages of the brief pipeline.

Every function here is total: it accepts ``None`` or any string, never raises,
and returns a best-effort string. Only :func:`normalize_for_display` may run
the aggressive spacing repair, and only when garbling was detected.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Any, Mapping

from voxplan.services.outline_contract import OUTLINE_FIELDS

from .spacing import (
    SpacingDictionary,
    garbling_signals,
    repair_spacing_heuristically,
)

logger = logging.getLogger("voxplan.pipeline")

_INVISIBLES = re.compile(r"[\u200B-\u200D\u2060\u00AD\uFEFF\u2028\u2029]")
_CONTROL_TOKENS = re.compile(r"<#[0-9.]+#>")
_PLACEHOLDERS = re.compile(r"\[([^\]]+)\]")
_FIELD_LABEL = re.compile(rf"^\s*({'|'.join(OUTLINE_FIELDS)})\s*['\":\s]*", re.IGNORECASE)

MAX_PROSE_LENGTH = 4900


def strip_invisibles(text: str | None) -> str:
    """NBSP to space, drop zero-width characters, NFC-compose accents."""

    s = str(text or "")
    s = s.replace("\u00A0", " ")
    s = _INVISIBLES.sub("", s)
    return unicodedata.normalize("NFC", s)


def tighten_obvious_splits(text: str | None) -> str:
    """Rejoin ``201 4`` -> ``2014`` and ``l ' institution`` -> ``l'institution``."""

    s = str(text or "")
    if not s:
        return s
    s = re.sub(r"(\d)\s+(?=\d)", r"\1", s)
    s = re.sub(r"\s+(['’])", r"\1", s)
    s = re.sub(r"(['’])\s+", r"\1", s)
    return s


def prepare_for_synthesis(text: str | None) -> str:
    """Conservative clean-up right before the speech engine."""

    s = tighten_obvious_splits(strip_invisibles(text))
    s = _CONTROL_TOKENS.sub("", s)
    s = _PLACEHOLDERS.sub(r"(\1)", s)
    s = re.sub(r"\s+", " ", s)
    return s.strip()


def _flow_lines(s: str) -> str:
    s = s.replace("\r", "")
    s = re.sub(r"\n{3,}", "\n\n", s)
    s = re.sub(r"(?<!\n)\n(?!\n)", " ", s)
    s = re.sub(r"[ \t]+", " ", s)

    s = re.sub(r"\s+([,;:.!?…])", r"\1", s)
    s = re.sub(r"([.!?…])\s+", r"\1 ", s)
    return s.strip()


_MAX_REPAIR_PASSES = 20


def normalize_for_display(
    text: str | None,
    dictionary: SpacingDictionary | None = None,
) -> str:
    """Flowing prose for display; repairs spacing only if garbling is detected.

    Detection runs on the already-flowed text and repair is repeated until it
    stops changing anything, so the result is stable under a second call.
    """

    s = _flow_lines(tighten_obvious_splits(strip_invisibles(text)))

    for _ in range(_MAX_REPAIR_PASSES):
        signals = garbling_signals(s, dictionary)
        if not signals:
            break
        logger.info("Display normalization detected garbling: %s", signals.raised())
        repaired = _flow_lines(repair_spacing_heuristically(s, dictionary))
        if repaired == s:
            break
        s = repaired

    return s


def normalize_prose(text: str | None) -> str:
    """Flatten markdown-ish model output into speakable sentences."""

    s = tighten_obvious_splits(strip_invisibles(text))

    s = re.sub(r"```[\s\S]*?```", " ", s)
    s = re.sub(r"<[^>]+>", " ", s)

    # Bullets and outline numbering at line starts.
    s = re.sub(r"^[ \t]*(?:[-*•·>]+[ \t]*)", "", s, flags=re.MULTILINE)
    s = re.sub(
        r"^[ \t]*(?:[IVXLCM]+\.|[A-Z]\.|\d+\.|\d+\)|\([a-zA-Z0-9]+\))[ \t]*",
        "",
        s,
        flags=re.MULTILINE,
    )

    s = s.replace("\r", "")
    s = re.sub(r"\n{2,}", ". ", s)
    s = s.replace("\n", " ")
    s = re.sub(r"\s+", " ", s).strip()

    s = re.sub(r"\s+([,;:.!?…])", r"\1", s)
    s = re.sub(r"\.(?:\s*\.)+", ".", s)

    if s and not re.search(r"[.!?…]$", s):
        s += "."

    if len(s) > MAX_PROSE_LENGTH:
        s = s[:MAX_PROSE_LENGTH]
    return s


def strip_field_label(text: str | None) -> str:
    """Drop a leading ``introduction:``-style label a model may echo back."""

    s = strip_invisibles(text).strip()
    return _FIELD_LABEL.sub("", s, count=1)


def clean_outline_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(data)
    for name in OUTLINE_FIELDS:
        value = out.get(name)
        if isinstance(value, str):
            out[name] = strip_invisibles(value).strip()
    return out


__all__ = [
    "MAX_PROSE_LENGTH",
    "clean_outline_fields",
    "normalize_for_display",
    "normalize_prose",
    "prepare_for_synthesis",
    "strip_field_label",
    "strip_invisibles",
    "tighten_obvious_splits",
]
