"""Sentence packing for the synthesis model's input limit."""

from __future__ import annotations

import pytest

from voxplan.pipelines.brief import chunk_text


def test_empty_text_produces_no_chunks():
    assert chunk_text("", 100) == []
    assert chunk_text("   ", 100) == []
    assert chunk_text(None, 100) == []


def test_text_within_limit_is_one_chunk():
    chunks = chunk_text("  Une seule phrase.  ", 100)
    assert [(c.index, c.text) for c in chunks] == [(0, "Une seule phrase.")]


def test_sentences_are_packed_greedily():
    chunks = chunk_text("Phrase un. Phrase deux. Phrase trois.", 25)
    assert [c.text for c in chunks] == ["Phrase un. Phrase deux.", "Phrase trois."]
    assert [c.index for c in chunks] == [0, 1]


def test_overlong_sentence_is_hard_wrapped():
    chunks = chunk_text("x" * 25, 10)
    assert [c.text for c in chunks] == ["x" * 10, "x" * 10, "x" * 5]


def test_hard_wrap_flushes_the_pending_chunk_first():
    text = "Court. " + "y" * 12 + " Fin."
    chunks = chunk_text(text, 10)
    assert [c.text for c in chunks] == ["Court.", "y" * 10, "yy Fin."]


@pytest.mark.parametrize("limit", [35, 40, 80])
def test_chunks_respect_limit_and_keep_every_sentence(limit):
    text = (
        "Le sujet porte sur la liberté! Pourquoi la défendre? "
        "Parce qu'elle fonde la démocratie… Nous verrons trois axes. "
        "Conclusion rapide."
    )
    chunks = chunk_text(text, limit)
    assert all(len(c.text) <= limit for c in chunks)
    assert " ".join(c.text for c in chunks) == " ".join(text.split())
