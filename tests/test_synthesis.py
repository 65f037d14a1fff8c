"""Chunked synthesis with re-hosting."""

from __future__ import annotations

import pytest

from conftest import FakeStorage, ScriptedClient, build_services, failed
from voxplan.config.settings import VoiceConfig
from voxplan.pipelines.brief import SpeechSynthesizer
from voxplan.pipelines.brief.synthesis import extract_audio_url, synthesis_shapes
from voxplan.services import SynthesisError

TEXT = "Première phrase du brouillon. Deuxième phrase du brouillon."


def synthesizer_for(client: ScriptedClient, storage: FakeStorage, chunk_max_length: int = 35) -> SpeechSynthesizer:
    _, negotiator, _, _ = build_services(client)
    return SpeechSynthesizer(
        negotiator,
        storage,
        model="minimax/speech-02-turbo",
        voice=VoiceConfig(),
        chunk_max_length=chunk_max_length,
    )


def test_extract_audio_url_shapes():
    assert extract_audio_url(["https://a/1.mp3", "https://a/2.mp3"]) == "https://a/1.mp3"
    assert extract_audio_url("https://a/1.mp3") == "https://a/1.mp3"
    assert extract_audio_url({"audio": "https://a/1.mp3"}) == "https://a/1.mp3"
    assert extract_audio_url({"other": 1}) is None
    assert extract_audio_url([]) is None


def test_first_shape_carries_the_full_voice_settings():
    shape = synthesis_shapes("Bonjour", VoiceConfig())[0]
    assert shape["voice_id"] == "French_MaleNarrator"
    assert shape["sample_rate"] == 32000
    assert shape["channel"] == "mono"
    assert shape["language_boost"] == "French"
    assert shape["english_normalization"] is False


@pytest.mark.anyio
async def test_each_chunk_is_voiced_and_rehosted():
    client = ScriptedClient(lambda model, payload: f"https://replicate.delivery/{len(payload['text'])}.mp3")
    storage = FakeStorage()

    result = await synthesizer_for(client, storage).synthesize(TEXT)

    assert result.chunk_count == 2
    assert [a.index for a in result.artifacts] == [0, 1]
    assert all(a.durable for a in result.artifacts)
    assert [category for _, category, _ in storage.rehosted] == ["tts", "tts"]
    assert result.urls == ["https://bucket.example/tts/0.mp3", "https://bucket.example/tts/1.mp3"]


@pytest.mark.anyio
async def test_rehost_failure_keeps_provider_url():
    client = ScriptedClient(lambda model, payload: "https://replicate.delivery/x.mp3")
    storage = FakeStorage(fail_rehost={1})

    result = await synthesizer_for(client, storage).synthesize(TEXT)

    assert result.artifacts[0].durable
    assert not result.artifacts[1].durable
    assert result.urls[1] == "https://replicate.delivery/x.mp3"


@pytest.mark.anyio
async def test_falls_back_to_simpler_shapes():
    def handler(model, payload):
        return {"audio": "https://replicate.delivery/p.mp3"} if "prompt" in payload else failed()

    client = ScriptedClient(handler)
    result = await synthesizer_for(client, FakeStorage(), chunk_max_length=1400).synthesize(TEXT)

    assert len(result.artifacts) == 1
    assert [sorted(payload) for _, payload in client.calls][-1] == ["prompt", "voice_id"]
    assert len(client.calls) == 3


@pytest.mark.anyio
async def test_no_audio_at_all_raises():
    client = ScriptedClient(lambda model, payload: failed())

    with pytest.raises(SynthesisError):
        await synthesizer_for(client, FakeStorage()).synthesize(TEXT)


@pytest.mark.anyio
async def test_empty_text_raises():
    client = ScriptedClient(lambda model, payload: "https://x/y.mp3")

    with pytest.raises(SynthesisError):
        await synthesizer_for(client, FakeStorage()).synthesize("   ")
    assert client.calls == []
