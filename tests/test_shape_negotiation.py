"""Ordered model/payload negotiation."""

from __future__ import annotations

import pytest

from conftest import ScriptedClient, failed
from voxplan.services import (
    AllShapesExhausted,
    InferenceGateway,
    MissingCredentials,
    ShapeNegotiator,
)

CANDIDATES = [{"shape": i} for i in range(5)]


def negotiator_for(client: ScriptedClient) -> ShapeNegotiator:
    return ShapeNegotiator(InferenceGateway(client, poll_interval=0, max_polls=2))


@pytest.mark.anyio
@pytest.mark.parametrize("k", [0, 2, 4])
async def test_stops_at_first_accepted_shape(k):
    client = ScriptedClient(lambda model, payload: "ok" if payload["shape"] == k else failed())

    result = await negotiator_for(client).try_shapes("owner/model", CANDIDATES, stage="test")

    assert [payload["shape"] for _, payload in client.calls] == list(range(k + 1))
    assert result.shape_index == k
    assert result.output == "ok"
    assert [a.succeeded for a in result.attempts] == [False] * k + [True]


@pytest.mark.anyio
async def test_rejected_output_moves_to_next_shape():
    outputs = {0: "", 1: "   ", 2: "texte"}
    client = ScriptedClient(lambda model, payload: outputs.get(payload["shape"], failed()))

    result = await negotiator_for(client).try_shapes(
        "owner/model",
        CANDIDATES,
        lambda output: bool(output.strip()),
    )

    assert result.shape_index == 2
    assert len(client.calls) == 3


@pytest.mark.anyio
async def test_falls_back_to_next_model_after_all_shapes():
    client = ScriptedClient(lambda model, payload: "ok" if model == "second/model" else failed())

    result = await negotiator_for(client).try_shapes(
        ["first/model", "first/model", "second/model"],
        CANDIDATES,
    )

    assert result.model == "second/model"
    assert result.shape_index == 0
    assert len(client.calls) == len(CANDIDATES) + 1


@pytest.mark.anyio
async def test_exhaustion_reports_last_error_and_attempts():
    client = ScriptedClient(lambda model, payload: failed(f"shape {payload['shape']} refused"))

    with pytest.raises(AllShapesExhausted) as excinfo:
        await negotiator_for(client).try_shapes("owner/model", CANDIDATES, stage="transcription")

    assert excinfo.value.stage == "transcription"
    assert "shape 4 refused" in excinfo.value.last_error
    assert len(excinfo.value.attempts) == len(CANDIDATES)


@pytest.mark.anyio
async def test_missing_credentials_stop_negotiation():
    client = ScriptedClient(lambda model, payload: MissingCredentials("no token"))

    with pytest.raises(MissingCredentials):
        await negotiator_for(client).try_shapes("owner/model", CANDIDATES)
    assert len(client.calls) == 1


@pytest.mark.anyio
async def test_no_model_configured_is_exhaustion():
    client = ScriptedClient(lambda model, payload: "ok")

    with pytest.raises(AllShapesExhausted):
        await negotiator_for(client).try_shapes(["", "  "], CANDIDATES)
    assert client.calls == []
