"""FastAPI dependencies wiring settings into the pipeline components.

Inference clients are created per request and closed once the response is
sent; the S3 client is shared.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, AsyncIterator

from fastapi import Depends

from voxplan.pipelines.brief import (
    BriefPipeline,
    OutlineOrchestrator,
    SpeechReformatter,
    SpeechSynthesizer,
    TextValidator,
    Transcriber,
    load_dictionary,
)
from voxplan.services import (
    CompletionService,
    InferenceGateway,
    JsonRepairService,
    ObjectStorage,
    ReplicateClient,
    ShapeNegotiator,
)

from .settings import Settings, settings


def get_settings() -> Settings:
    return settings


SettingsDep = Annotated[Settings, Depends(get_settings)]


async def get_replicate_client(app_settings: SettingsDep) -> AsyncIterator[ReplicateClient]:
    client = ReplicateClient(app_settings.replicate)
    try:
        yield client
    finally:
        await client.aclose()


def get_gateway(
    app_settings: SettingsDep,
    client: Annotated[ReplicateClient, Depends(get_replicate_client)],
) -> InferenceGateway:
    return InferenceGateway(
        client,
        poll_interval=app_settings.replicate.poll_interval,
        max_polls=app_settings.replicate.max_polls,
    )


GatewayDep = Annotated[InferenceGateway, Depends(get_gateway)]


def get_negotiator(gateway: GatewayDep) -> ShapeNegotiator:
    return ShapeNegotiator(gateway)


NegotiatorDep = Annotated[ShapeNegotiator, Depends(get_negotiator)]


def get_completion(app_settings: SettingsDep, negotiator: NegotiatorDep) -> CompletionService:
    return CompletionService(negotiator, model=app_settings.models.completion)


CompletionDep = Annotated[CompletionService, Depends(get_completion)]


@lru_cache(maxsize=1)
def _shared_storage() -> ObjectStorage:
    return ObjectStorage(settings.storage)


def get_storage() -> ObjectStorage:
    return _shared_storage()


StorageDep = Annotated[ObjectStorage, Depends(get_storage)]


def get_transcriber(app_settings: SettingsDep, negotiator: NegotiatorDep) -> Transcriber:
    return Transcriber(
        negotiator,
        models=app_settings.models.transcription_candidates,
        language=app_settings.pipeline.language,
        min_length=app_settings.pipeline.min_transcript_length,
        max_polls=app_settings.models.transcription_max_polls,
    )


TranscriberDep = Annotated[Transcriber, Depends(get_transcriber)]


def get_outline_orchestrator(
    app_settings: SettingsDep,
    gateway: GatewayDep,
    completion: CompletionDep,
) -> OutlineOrchestrator:
    models = app_settings.models
    json_repair = JsonRepairService(
        gateway,
        model=models.json_repair,
        poll_interval=models.json_repair_poll_interval,
        max_polls=models.json_repair_max_polls,
    )
    return OutlineOrchestrator(
        completion,
        json_repair,
        dictionary=load_dictionary(app_settings.pipeline.spacing_dictionary_path),
        field_repair_poll_interval=models.field_repair_poll_interval,
        field_repair_max_polls=models.field_repair_max_polls,
    )


OutlineDep = Annotated[OutlineOrchestrator, Depends(get_outline_orchestrator)]


def get_reformatter(completion: CompletionDep) -> SpeechReformatter:
    return SpeechReformatter(completion)


ReformatterDep = Annotated[SpeechReformatter, Depends(get_reformatter)]


def get_validator(app_settings: SettingsDep, completion: CompletionDep) -> TextValidator:
    models = app_settings.models
    return TextValidator(
        completion,
        model=models.validation_model,
        poll_interval=models.validation_poll_interval,
        max_polls=models.validation_max_polls,
    )


ValidatorDep = Annotated[TextValidator, Depends(get_validator)]


def get_synthesizer(
    app_settings: SettingsDep,
    negotiator: NegotiatorDep,
    storage: StorageDep,
) -> SpeechSynthesizer:
    return SpeechSynthesizer(
        negotiator,
        storage,
        model=app_settings.models.synthesis,
        voice=app_settings.voice,
        chunk_max_length=app_settings.pipeline.chunk_max_length,
    )


SynthesizerDep = Annotated[SpeechSynthesizer, Depends(get_synthesizer)]


def get_pipeline(
    app_settings: SettingsDep,
    storage: StorageDep,
    transcriber: TranscriberDep,
    outline: OutlineDep,
    reformatter: ReformatterDep,
    synthesizer: SynthesizerDep,
) -> BriefPipeline:
    return BriefPipeline(
        storage,
        transcriber,
        outline,
        reformatter,
        synthesizer,
        config=app_settings.pipeline,
    )


PipelineDep = Annotated[BriefPipeline, Depends(get_pipeline)]
