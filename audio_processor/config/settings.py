from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from audio_processor.errors import ConfigurationMissingError


class GeminiConfig(BaseSettings):
    """Google Gemini configuration."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"),
    )
    model: str = Field(
        default="gemini-2.5-flash",
        validation_alias="GEMINI_MODEL",
    )
    temperature: float | None = Field(
        default=None,
        validation_alias="GEMINI_TEMPERATURE",
        ge=0.0,
        le=2.0,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class BedrockConfig(BaseSettings):
    """Amazon Bedrock configuration."""

    region: str = Field(
        default="us-east-1",
        validation_alias="BEDROCK_REGION",
    )
    model_id: str = Field(
        default="amazon.nova-lite-v1:0",
        validation_alias="BEDROCK_MODEL_ID",
    )
    max_tokens: int = Field(
        default=4096,
        validation_alias="BEDROCK_MAX_TOKENS",
        ge=1,
        le=8192,
    )
    temperature: float = Field(
        default=0.2,
        validation_alias="BEDROCK_TEMPERATURE",
        ge=0.0,
        le=1.0,
    )
    top_p: float = Field(
        default=0.9,
        validation_alias="BEDROCK_TOP_P",
        ge=0.0,
        le=1.0,
    )
    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="BEDROCK_API_KEY",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
    )


class TranscribeConfig(BaseSettings):
    """Amazon Transcribe streaming configuration (Bedrock provider only)."""

    region: str = "us-east-1"
    language_code: str = "es-US"
    media_sample_rate_hz: int = Field(default=16000, ge=8000, le=48000)

    model_config = SettingsConfigDict(
        env_prefix="TRANSCRIBE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Audio Processor AI"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/pipeline.log"
    transcript_log_file: str = "logs/transcripts.log"

    # Remote AI service
    ai_provider: Literal["gemini", "bedrock"] = "gemini"
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    bedrock: BedrockConfig = Field(default_factory=BedrockConfig)
    transcribe: TranscribeConfig = Field(default_factory=TranscribeConfig)

    # Sessions
    max_sessions: int = Field(default=500, ge=1)
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, ge=1)

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


def ensure_credentials(config: Settings) -> None:
    """Fail fast when the active provider has no API credential."""

    if config.ai_provider == "gemini":
        key = config.gemini.api_key
        variable = "GEMINI_API_KEY/API_KEY"
    else:
        key = config.bedrock.api_key
        variable = "BEDROCK_API_KEY"

    if key is None or not key.get_secret_value().strip():
        raise ConfigurationMissingError(
            f"La variable de entorno {variable} no está configurada."
        )


# Global settings instance
settings = Settings()
