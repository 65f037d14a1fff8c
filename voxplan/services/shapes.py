"""Ordered trial of model identifiers and payload shapes.

Replicate models do not agree on an input schema (``audio`` vs ``audio_url``,
``messages`` vs ``prompt``...), and the accepted schema changes between model
versions. Stages therefore describe their candidates as ordered data and let
:class:`ShapeNegotiator` walk them sequentially until one is accepted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Sequence

from voxplan.telemetry import record_shape_attempt

from .errors import AllShapesExhausted, InferenceError, MissingCredentials
from .inference import InferenceGateway

logger = logging.getLogger("voxplan.pipeline")

OutputCheck = Callable[[Any], bool]


def _non_empty(output: Any) -> bool:
    return output not in (None, "", [], {})


@dataclass(frozen=True)
class ShapeAttempt:
    """One model/payload combination that was tried."""

    model: str
    shape_index: int
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class NegotiatedOutput:
    """Output of the first accepted combination plus the trail that led to it."""

    output: Any
    model: str
    shape_index: int
    attempts: tuple[ShapeAttempt, ...] = field(default_factory=tuple)


class ShapeNegotiator:
    """Try candidate payloads per model, strictly in order, first success wins."""

    def __init__(self, gateway: InferenceGateway) -> None:
        self._gateway = gateway

    async def try_shapes(
        self,
        model_refs: str | Sequence[str],
        candidates: Sequence[Mapping[str, Any]],
        accept: OutputCheck = _non_empty,
        *,
        stage: str = "inference",
        poll_interval: float | None = None,
        max_polls: int | None = None,
    ) -> NegotiatedOutput:
        models = _unique_models(model_refs)
        if not models or not candidates:
            raise AllShapesExhausted(stage, "No model or input shape configured")

        attempts: list[ShapeAttempt] = []
        last_error: str | None = None

        for m_index, model in enumerate(models, start=1):
            logger.info("[%s] model %s/%s: %s", stage, m_index, len(models), model)
            for s_index, payload in enumerate(candidates):
                logger.info(
                    "[%s] shape %s/%s keys=%s",
                    stage,
                    s_index + 1,
                    len(candidates),
                    sorted(payload.keys()),
                )
                try:
                    output = await self._gateway.run(
                        model,
                        payload,
                        poll_interval=poll_interval,
                        max_polls=max_polls,
                        stage=stage,
                    )
                except MissingCredentials:
                    record_shape_attempt(stage, "unconfigured")
                    raise
                except InferenceError as exc:
                    last_error = str(exc)
                    attempts.append(ShapeAttempt(model, s_index, last_error))
                    record_shape_attempt(stage, "error")
                    logger.warning("[%s] shape %s failed on %s: %s", stage, s_index + 1, model, exc)
                    continue

                if not accept(output):
                    last_error = f"{model} returned an unusable output for shape {s_index + 1}"
                    attempts.append(ShapeAttempt(model, s_index, last_error))
                    record_shape_attempt(stage, "rejected")
                    logger.warning("[%s] %s", stage, last_error)
                    continue

                attempts.append(ShapeAttempt(model, s_index))
                record_shape_attempt(stage, "accepted")
                logger.info("[%s] accepted model=%s shape=%s", stage, model, s_index + 1)
                return NegotiatedOutput(
                    output=output,
                    model=model,
                    shape_index=s_index,
                    attempts=tuple(attempts),
                )

        logger.error("[%s] all shapes exhausted, last error: %s", stage, last_error)
        raise AllShapesExhausted(stage, last_error, attempts)


def _unique_models(model_refs: str | Sequence[str]) -> list[str]:
    if isinstance(model_refs, str):
        model_refs = [model_refs]
    seen: list[str] = []
    for ref in model_refs:
        cleaned = (ref or "").strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


__all__ = ["NegotiatedOutput", "OutputCheck", "ShapeAttempt", "ShapeNegotiator"]
