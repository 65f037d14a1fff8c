from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReplicateConfig(BaseSettings):
    """Replicate predictions API configuration"""

    api_token: SecretStr | None = Field(
        default=None,
        validation_alias="REPLICATE_API_TOKEN",
    )
    base_url: str = Field(
        default="https://api.replicate.com/v1",
        validation_alias="REPLICATE_BASE_URL",
    )
    request_timeout: float = Field(
        default=30.0,
        validation_alias="REPLICATE_REQUEST_TIMEOUT",
        gt=0,
    )
    poll_interval: float = Field(
        default=2.0,
        validation_alias="REPLICATE_POLL_INTERVAL",
        ge=0,
        description="Seconds slept between two status polls of a prediction.",
    )
    max_polls: int = Field(
        default=30,
        validation_alias="REPLICATE_MAX_POLLS",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class ModelsConfig(BaseSettings):
    """Model identifiers and per-stage polling ceilings."""

    completion: str = "openai/gpt-5"
    transcription: str = Field(
        default="",
        description="Preferred Whisper build, optionally pinned as `owner/name:version`.",
    )
    transcription_fallbacks: list[str] = [
        "openai/whisper-large-v3",
        "openai/whisper",
    ]
    synthesis: str = "minimax/speech-02-turbo"
    json_repair: str = "intelligent-utilities/repair-json"
    validation: str = Field(
        default="",
        description="Model used for YES/NO formatting checks; empty uses `completion`.",
    )

    transcription_max_polls: int = Field(default=25, ge=1)
    json_repair_max_polls: int = Field(default=15, ge=1)
    json_repair_poll_interval: float = Field(default=1.0, ge=0)
    field_repair_max_polls: int = Field(default=20, ge=1)
    field_repair_poll_interval: float = Field(default=1.5, ge=0)
    validation_max_polls: int = Field(default=15, ge=1)
    validation_poll_interval: float = Field(default=1.0, ge=0)

    model_config = SettingsConfigDict(
        env_prefix="MODEL_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def transcription_candidates(self) -> list[str]:
        """Configured Whisper model first, then the known stable builds."""

        candidates = [self.transcription] if self.transcription else []
        candidates.extend(self.transcription_fallbacks)
        return candidates

    @property
    def validation_model(self) -> str:
        return self.validation or self.completion


class VoiceConfig(BaseSettings):
    """Speech synthesis voice and prosody defaults."""

    voice_id: str = "French_MaleNarrator"
    audio_format: str = "mp3"
    speed: float = 1.0
    volume: float = 1.0
    pitch: int = 0
    sample_rate: int = 32000
    bitrate: int = 128000
    channel: str = "mono"
    language_boost: str = "French"

    model_config = SettingsConfigDict(
        env_prefix="TTS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class StorageConfig(BaseSettings):
    """S3 configuration"""

    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    region: str = "us-east-1"
    bucket_name: str = "audio-recordings"
    endpoint_url: Optional[str] = None
    signed_url_ttl: int = Field(default=3600, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PipelineConfig(BaseSettings):
    """Thresholds shared by the brief pipeline stages."""

    language: str = "fr"
    chunk_max_length: int = Field(
        default=1400,
        ge=1,
        description="Longest text handed to the synthesis model in one prediction.",
    )
    min_synthesis_length: int = Field(default=10, ge=0)
    min_reformat_length: int = Field(default=20, ge=0)
    min_transcript_length: int = Field(default=5, ge=0)
    spacing_dictionary_path: Optional[str] = None

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "VoxPlan Brief Pipeline"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # Replicate
    replicate: ReplicateConfig = Field(default_factory=ReplicateConfig)

    # Models
    models: ModelsConfig = Field(default_factory=ModelsConfig)

    # Voice
    voice: VoiceConfig = Field(default_factory=VoiceConfig)

    # S3
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # Pipeline
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
