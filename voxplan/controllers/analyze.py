"""Outline generation endpoint.

Always answers 200: generation and schema problems come back as a fallback
document, and the ``X-Outline-Outcome`` header says which path was taken.
"""

from fastapi import APIRouter, Response

from voxplan.config.dependencies import OutlineDep
from voxplan.views import AnalyzeRequest, OutlineResponse

from .errors import ERROR_RESPONSES

router = APIRouter(tags=["brief"], responses=ERROR_RESPONSES)

OUTCOME_HEADER = "X-Outline-Outcome"


@router.post("/analyze", response_model=OutlineResponse)
async def analyze(
    request: AnalyzeRequest,
    response: Response,
    orchestrator: OutlineDep,
) -> OutlineResponse:
    result = await orchestrator.generate(request.transcript)
    response.headers[OUTCOME_HEADER] = result.outcome.value
    return OutlineResponse(**result.document.model_dump())
