"""Properties of the text clean-up helpers."""

from __future__ import annotations

import random

import pytest

from voxplan.pipelines.brief import (
    SpacingDictionary,
    detect_garbling,
    normalize_for_display,
    normalize_prose,
    prepare_for_synthesis,
    repair_spacing_heuristically,
    strip_invisibles,
)
from voxplan.pipelines.brief.normalizer import strip_field_label
from voxplan.pipelines.brief.spacing import garbling_signals

CLEAN_TEXTS = [
    "Bonjour  à tous.\nVoici le plan ,  en trois parties !",
    "Le sujet demande de discuter la place de la liberté dans la démocratie moderne.",
    "Depuis toujours, la liberté fascine les philosophes.\n\nNous verrons comment elle structure la vie politique.",
    "L'énoncé demande une analyse précise du texte.",
]

EVERYDAY_SENTENCES = [
    "Cela veut dire que la liberté est fragile.",
    "Il faut donc agir sans être vu.",
    "Leurs idées ont une fois de plus été mises en avant.",
    "Il faut avoir le sens du bien commun pour agir.",
    "Le rôle de la loi est donc de protéger les plus faibles.",
]

GARBLED_TEXTS = [
    "L'é non cé demande une analy se",
    "L e s u j e t porte sur la liberté",
    "task _ understanding et introduction _ text",
    "strat ég ie de la C ais se",
    "con clu sion gé né rale",
    "Les mé can ism es sont ex - pliqués",
]


@pytest.mark.parametrize("text", CLEAN_TEXTS)
def test_clean_text_has_no_garbling_signal(text):
    assert not detect_garbling(text)


@pytest.mark.parametrize("text", EVERYDAY_SENTENCES)
def test_everyday_sentences_have_no_signal_and_stay_unchanged(text):
    assert not garbling_signals(text)
    assert normalize_for_display(text) == text
    assert repair_spacing_heuristically(text) == text


VOCABULARY = [
    "la", "liberté", "est", "donc", "Cela", "veut", "dire", "que", "con", "clu",
    "sion", "gé", "né", "rale", "mé", "can", "ism", "es", "y", "z", "l", "ef",
    "é", "-", ",", ".", "!", "\n", "\n\n", "\n\n\n",
]


def generated_texts(count: int = 500, seed: int = 1789):
    rng = random.Random(seed)
    for _ in range(count):
        yield " ".join(rng.choice(VOCABULARY) for _ in range(rng.randint(1, 10)))


@pytest.mark.parametrize("text", [*CLEAN_TEXTS, *EVERYDAY_SENTENCES, "y z \n l z ef la né"])
def test_display_normalization_is_idempotent(text):
    once = normalize_for_display(text)
    assert normalize_for_display(once) == once


def test_display_normalization_is_idempotent_on_generated_mixes():
    unstable = [
        text
        for text in generated_texts()
        if normalize_for_display(normalize_for_display(text)) != normalize_for_display(text)
    ]
    assert unstable == []


def test_repair_never_increases_garbling_on_generated_mixes():
    worse = [
        text
        for text in generated_texts(seed=1848)
        if garbling_signals(repair_spacing_heuristically(text)).count > garbling_signals(text).count
    ]
    assert worse == []


def test_display_normalization_tidies_whitespace_and_punctuation():
    assert normalize_for_display(CLEAN_TEXTS[0]) == "Bonjour à tous. Voici le plan, en trois parties!"


def test_display_normalization_keeps_clean_words_intact():
    text = "Le sujet demande de discuter la place de la liberté."
    assert normalize_for_display(text) == text


@pytest.mark.parametrize("text", GARBLED_TEXTS)
def test_garbled_text_is_detected(text):
    assert detect_garbling(text)


@pytest.mark.parametrize("text", GARBLED_TEXTS)
def test_repair_never_increases_detected_garbling(text):
    before = garbling_signals(text).count
    after = garbling_signals(repair_spacing_heuristically(text)).count
    assert after <= before


def test_repair_fixes_known_broken_words():
    assert repair_spacing_heuristically("L'é non cé demande une analy se") == "L'énoncé demande une analyse"


def test_repair_joins_letter_spacing_and_json_keys():
    assert repair_spacing_heuristically("L e s u j e t") == "Lesujet"
    assert repair_spacing_heuristically("task _ understanding") == "task_understanding"


def test_repair_merges_short_syllable_runs():
    assert repair_spacing_heuristically("con clu sion gé né rale") == "conclusion générale"


def test_repair_leaves_clean_text_untouched():
    text = CLEAN_TEXTS[1]
    assert repair_spacing_heuristically(text) == text


def test_custom_dictionary_replaces_bundled_rules():
    dictionary = SpacingDictionary.from_pairs([[r"\bdis\s+ser\s+ta\s+tion\b", "dissertation"]])
    assert len(dictionary) == 1
    assert detect_garbling("Une dis ser ta tion", dictionary)
    assert "dissertation" in repair_spacing_heuristically("Une dis ser ta tion", dictionary)


def test_invalid_dictionary_rules_are_skipped():
    dictionary = SpacingDictionary.from_pairs([["(unclosed", "x"], [r"\bok\b", "OK"]])
    assert len(dictionary) == 1


def test_missing_dictionary_file_yields_no_rules(tmp_path):
    assert len(SpacingDictionary.from_file(tmp_path / "absent.json")) == 0


def test_strip_invisibles_removes_the_invisible_set():
    text = "a\u200bb\u00a0c\ufeffd\u00ade\u2060f\u2028g"
    cleaned = strip_invisibles(text)
    assert cleaned == "ab cdefg"
    assert strip_invisibles(cleaned) == cleaned


def test_strip_invisibles_composes_accents():
    assert strip_invisibles("e\u0301te\u0301") == "\u00e9t\u00e9"


def test_strip_invisibles_accepts_none():
    assert strip_invisibles(None) == ""


def test_prepare_for_synthesis_drops_control_tokens_and_brackets():
    text = "Voir <#0.5#> la date [A REMPLIR] en 201 4 ,  l ' institution"
    assert prepare_for_synthesis(text) == "Voir la date (A REMPLIR) en 2014 , l'institution"


def test_normalize_prose_flattens_lists_and_outline_numbering():
    assert normalize_prose("- point un\n- point deux") == "point un point deux."
    assert normalize_prose("I. Intro\n\nII. Suite") == "Intro. Suite."


def test_normalize_prose_drops_code_and_markup():
    assert normalize_prose("Texte <b>gras</b>\n```\ncode\n```") == "Texte gras."


def test_normalize_prose_of_empty_text_is_empty():
    assert normalize_prose("") == ""


def test_strip_field_label():
    assert strip_field_label('introduction: "Depuis toujours') == "Depuis toujours"
    assert strip_field_label("Texte sans label") == "Texte sans label"
