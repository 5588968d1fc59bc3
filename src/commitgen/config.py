"""Runtime configuration for commit message generation."""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file.

    All settings are prefixed with COMMITGEN_ (e.g., COMMITGEN_REQUEST_TIMEOUT).
    The API key is also read from the standard OPENAI_API_KEY variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMMITGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("COMMITGEN_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="OpenAI API key used when no credential is passed explicitly",
    )

    # Diff routing
    inline_diff_token_limit: int = Field(
        default=4096,
        description="Diffs estimated above this many tokens are uploaded instead of inlined",
    )
    request_diff_size_limit: int = Field(
        default=1_048_576,  # 1MiB
        description="Hard ceiling in bytes for a diff sent to the model",
    )

    # Remote index
    index_name: str = Field(default="commitgen-diff", description="Vector store name")
    document_filename: str = Field(default="diff.txt", description="Uploaded file name")
    index_expiry_days: int = Field(
        default=1,
        description="Days of inactivity after which the vector store expires",
    )
    index_poll_interval: float = Field(
        default=0.5,
        description="Seconds between indexing status checks",
    )
    index_poll_attempts: int = Field(
        default=20,
        description="Maximum number of indexing status checks",
    )

    # Client settings
    request_timeout: float = Field(
        default=120.0,
        description="Per-request timeout in seconds for OpenAI API calls",
    )
    max_retries: int = Field(
        default=0,
        description="Transport-level retries performed by the OpenAI client",
    )


def get_settings() -> Settings:
    """Load settings from the environment.

    Returns:
        A fresh Settings instance
    """
    return Settings()
