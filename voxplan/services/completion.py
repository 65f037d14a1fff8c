"""Language-model completion through the shape negotiator."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from .shapes import ShapeNegotiator

logger = logging.getLogger("voxplan.pipeline")


def join_output(output: Any) -> str:
    """Flatten a completion output (token fragments, ``{text}``, plain str)."""

    if output is None:
        return ""
    if isinstance(output, str):
        return output
    if isinstance(output, (list, tuple)):
        return "".join(str(part) for part in output if part is not None)
    if isinstance(output, dict):
        text = output.get("text") or output.get("output")
        return join_output(text)
    return str(output)


def _has_text(output: Any) -> bool:
    return bool(join_output(output).strip())


class CompletionService:
    """Prompt the completion model with the shapes known to be accepted."""

    def __init__(
        self,
        negotiator: ShapeNegotiator,
        *,
        model: str,
    ) -> None:
        self._negotiator = negotiator
        self._model = model

    @staticmethod
    def message_shapes(
        system_prompt: str,
        user_prompt: str,
        *,
        verbosity: str,
        reasoning_effort: str,
        max_tokens: int,
        suffix: str = "",
    ) -> list[dict[str, Any]]:
        """Candidates for a system/user exchange, most specific first."""

        user_with_suffix = f"{user_prompt}\n\n{suffix}" if suffix else user_prompt
        return [
            {
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_with_suffix},
                ],
                "verbosity": verbosity,
                "reasoning_effort": reasoning_effort,
                "max_completion_tokens": max_tokens,
            },
            {"prompt": f"{system_prompt}\n\n{user_with_suffix}"},
            {"system_prompt": system_prompt, "prompt": user_with_suffix},
            {
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ]
            },
            {"input": f"{system_prompt}\n\n{user_prompt}"},
        ]

    @staticmethod
    def prompt_shapes(
        prompt: str,
        *,
        verbosity: str,
        reasoning_effort: str,
        max_tokens: int,
    ) -> list[dict[str, Any]]:
        """Candidates for a single instruction prompt."""

        return [
            {
                "prompt": prompt,
                "verbosity": verbosity,
                "reasoning_effort": reasoning_effort,
                "max_completion_tokens": max_tokens,
            },
            {"prompt": prompt},
        ]

    async def complete(
        self,
        user_prompt: str,
        *,
        system_prompt: str | None = None,
        verbosity: str = "low",
        reasoning_effort: str = "minimal",
        max_tokens: int = 1000,
        suffix: str = "",
        models: Sequence[str] | None = None,
        poll_interval: float | None = None,
        max_polls: int | None = None,
        stage: str = "completion",
    ) -> str:
        """Return the generated text; raises ``AllShapesExhausted`` when nothing works."""

        if system_prompt is None:
            candidates = self.prompt_shapes(
                user_prompt,
                verbosity=verbosity,
                reasoning_effort=reasoning_effort,
                max_tokens=max_tokens,
            )
        else:
            candidates = self.message_shapes(
                system_prompt,
                user_prompt,
                verbosity=verbosity,
                reasoning_effort=reasoning_effort,
                max_tokens=max_tokens,
                suffix=suffix,
            )

        negotiated = await self._negotiator.try_shapes(
            list(models) if models else [self._model],
            candidates,
            _has_text,
            stage=stage,
            poll_interval=poll_interval,
            max_polls=max_polls,
        )
        text = join_output(negotiated.output).strip()
        logger.info("[%s] completion length=%s model=%s", stage, len(text), negotiated.model)
        return text


__all__ = ["CompletionService", "join_output"]
