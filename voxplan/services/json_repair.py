"""Client for the dedicated JSON-repair model."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from .errors import InferenceError
from .inference import InferenceGateway

logger = logging.getLogger("voxplan.pipeline")


class JsonRepairService:
    """Ask the repair model to turn malformed text into a JSON object."""

    def __init__(
        self,
        gateway: InferenceGateway,
        *,
        model: str,
        poll_interval: float = 1.0,
        max_polls: int = 15,
    ) -> None:
        self._gateway = gateway
        self._model = model
        self._poll_interval = poll_interval
        self._max_polls = max_polls

    async def repair(self, raw: str) -> Mapping[str, Any] | None:
        """Return the repaired object, or ``None`` when the model could not help."""

        if not raw or not raw.strip():
            return None

        try:
            output = await self._gateway.run(
                self._model,
                {"text": raw},
                poll_interval=self._poll_interval,
                max_polls=self._max_polls,
                stage="json_repair",
            )
        except InferenceError as exc:
            logger.warning("JSON repair model failed: %s", exc)
            return None

        repaired = _as_mapping(output)
        if repaired is None:
            logger.warning("JSON repair returned a non-object output (%s)", type(output).__name__)
        return repaired


def _as_mapping(output: Any) -> Mapping[str, Any] | None:
    if isinstance(output, Mapping):
        return output
    if isinstance(output, list) and output:
        output = "".join(str(part) for part in output)
    if isinstance(output, str):
        try:
            data = json.loads(output)
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, Mapping) else None
    return None


__all__ = ["JsonRepairService"]
