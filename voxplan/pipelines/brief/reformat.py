"""Spoken-word reformatting pass (Stage 04 of the brief pipeline)."""

from __future__ import annotations

import logging

from voxplan.services import CompletionService

from .prompts import REFORMAT_SYSTEM_PROMPT, REFORMAT_USER_TEMPLATE

logger = logging.getLogger("voxplan.pipeline")

REFORMAT_MAX_TOKENS = 1000


class SpeechReformatter:
    """Rewrite text so a French voice reads it naturally."""

    def __init__(self, completion: CompletionService) -> None:
        self._completion = completion

    async def reformat(self, text: str) -> str:
        """Raises ``AllShapesExhausted`` when the completion model gives nothing back."""

        result = await self._completion.complete(
            REFORMAT_USER_TEMPLATE.format(text=text),
            system_prompt=REFORMAT_SYSTEM_PROMPT,
            verbosity="low",
            reasoning_effort="low",
            max_tokens=REFORMAT_MAX_TOKENS,
            stage="reformat",
        )
        logger.info("Reformatted text length %s -> %s", len(text), len(result))
        return result


__all__ = ["SpeechReformatter"]
