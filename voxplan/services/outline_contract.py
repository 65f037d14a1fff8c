"""Pydantic model for validating the outline JSON returned by the LLM.

The outline orchestrator, the JSON-repair step and the HTTP views all run
through :class:`OutlineDocument` so downstream code only ever sees the five
mandatory string fields.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from .errors import SchemaInvalid

OUTLINE_FIELDS: tuple[str, ...] = (
    "task_understanding",
    "introduction",
    "detailed_plan",
    "conclusion",
    "draft",
)


class OutlineDocument(BaseModel):
    task_understanding: StrictStr
    introduction: StrictStr
    detailed_plan: StrictStr
    conclusion: StrictStr
    draft: StrictStr

    model_config = ConfigDict(extra="ignore")

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, name).strip() for name in OUTLINE_FIELDS)

    @classmethod
    def fallback(cls, raw: str) -> "OutlineDocument":
        """Empty structured fields; the raw text travels in ``draft``."""

        return cls(
            task_understanding="",
            introduction="",
            detailed_plan="",
            conclusion="",
            draft=(raw or "").strip(),
        )

    @classmethod
    def from_mapping(cls, data: Any) -> "OutlineDocument":
        if not isinstance(data, Mapping):
            raise SchemaInvalid(f"Expected a JSON object, got {type(data).__name__}")
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            missing = sorted(
                str(err["loc"][0]) for err in exc.errors() if err.get("loc")
            )
            raise SchemaInvalid(f"Outline fields missing or not strings: {missing}") from exc

    @classmethod
    def from_json(cls, payload: str) -> "OutlineDocument":
        cleaned = _clean_json_payload(payload)
        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise SchemaInvalid(f"Outline is not valid JSON: {exc}") from exc
        return cls.from_mapping(data)


def _clean_json_payload(payload: str) -> str:
    """Strip Markdown code blocks and find the first/last brace to extract JSON."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = ["OUTLINE_FIELDS", "OutlineDocument"]
