"""Application configuration."""

from .settings import (
    ModelsConfig,
    PipelineConfig,
    ReplicateConfig,
    Settings,
    StorageConfig,
    VoiceConfig,
    settings,
)

__all__ = [
    "ModelsConfig",
    "PipelineConfig",
    "ReplicateConfig",
    "Settings",
    "StorageConfig",
    "VoiceConfig",
    "settings",
]
