"""Service layer helpers for external integrations."""

from .completion import CompletionService, join_output
from .errors import (
    AllShapesExhausted,
    InferenceError,
    InferenceTimeout,
    JobFailed,
    MalformedResponse,
    MissingCredentials,
    ProviderUnavailable,
    SchemaInvalid,
    SynthesisError,
)
from .inference import InferenceGateway
from .json_repair import JsonRepairService
from .outline_contract import OUTLINE_FIELDS, OutlineDocument
from .replicate_client import InferenceJob, JobStatus, ModelRef, ReplicateClient
from .shapes import NegotiatedOutput, ShapeAttempt, ShapeNegotiator
from .storage import (
    ObjectStorage,
    StorageError,
    StoredObject,
    build_object_key,
    extension_for,
)

__all__ = [
    "AllShapesExhausted",
    "CompletionService",
    "InferenceError",
    "InferenceGateway",
    "InferenceJob",
    "InferenceTimeout",
    "JobFailed",
    "JobStatus",
    "JsonRepairService",
    "MalformedResponse",
    "MissingCredentials",
    "ModelRef",
    "NegotiatedOutput",
    "OUTLINE_FIELDS",
    "ObjectStorage",
    "OutlineDocument",
    "ProviderUnavailable",
    "ReplicateClient",
    "SchemaInvalid",
    "ShapeAttempt",
    "ShapeNegotiator",
    "StorageError",
    "StoredObject",
    "SynthesisError",
    "build_object_key",
    "extension_for",
    "join_output",
]
